"""
Image resolution run.

Fetches the complete starship catalog, resolves one image per starship
(wiki first, databank only when the wiki has nothing) and writes the
name -> image URL mapping once at the end.
"""

from functools import partial
from typing import Any, Callable, Dict, Iterable, Optional, Tuple

from .artifact import save_mapping
from .cascade import SWALLOWED_ERRORS
from .catalog import fetch_all_starships
from .config import Settings
from .http import HttpClient
from .logger import get_logger
from .sources import fetch_databank_image, fetch_wiki_image

Lookup = Callable[[str], str]


def _safe_lookup(lookup: Lookup, name: str, source: str) -> str:
    logger = get_logger()
    logger.record_lookup_attempt(source)
    try:
        image = lookup(name)
    except SWALLOWED_ERRORS as e:
        logger.debug(f"{source} lookup failed", name=name, error=str(e))
        return ""
    if image:
        logger.record_lookup_success(source)
    return image or ""


def resolve_image(name: str, wiki_lookup: Lookup, databank_lookup: Lookup) -> Tuple[str, Optional[str]]:
    """
    Resolve one starship name to ``(image_url, source)``.

    The databank is only consulted when the wiki lookup comes back empty.
    ``("", None)`` means neither source had an image.
    """
    image = _safe_lookup(wiki_lookup, name, "wiki")
    if image:
        return image, "wiki"
    image = _safe_lookup(databank_lookup, name, "databank")
    if image:
        return image, "databank"
    return "", None


def build_image_mapping(
    starships: Iterable[Dict[str, Any]],
    wiki_lookup: Lookup,
    databank_lookup: Lookup,
) -> Dict[str, str]:
    """Resolve every starship in order; misses are recorded as ""."""
    logger = get_logger()
    mapping: Dict[str, str] = {}
    for ship in starships:
        name = ship["name"]
        image, source = resolve_image(name, wiki_lookup, databank_lookup)
        mapping[name] = image
        if image:
            logger.info(f"{name}: ok ({source})", image=image)
        else:
            logger.record_lookup_missing()
            logger.warning(f"{name}: missing")
    return mapping


def run(settings: Settings, client: Optional[HttpClient] = None) -> Dict[str, str]:
    """
    Run the resolver end to end and write the artifact.

    Raises:
        CatalogError: If the starship list cannot be fetched; nothing is written
    """
    logger = get_logger()
    own_client = client is None
    if own_client:
        client = HttpClient(timeout=settings.timeout, user_agent=settings.user_agent)

    try:
        starships = fetch_all_starships(client, settings.swapi_base)
        mapping = build_image_mapping(
            starships,
            wiki_lookup=partial(_wiki, client, settings.wiki_api),
            databank_lookup=partial(_databank, client, settings.databank_base),
        )
    finally:
        if own_client:
            client.close()

    save_mapping(settings.images_path, mapping)
    logger.info(f"Wrote {settings.images_path}", entries=len(mapping))
    logger.log_metrics_summary()
    return mapping


def _wiki(client: HttpClient, api: str, name: str) -> str:
    return fetch_wiki_image(client, name, api=api)


def _databank(client: HttpClient, base: str, name: str) -> str:
    return fetch_databank_image(client, name, base=base)
