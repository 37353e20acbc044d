"""
SWAPI starship catalog access.

The resolver needs the whole catalog up front, so ``fetch_all_starships``
walks every page and fails the run on the first bad page. The browser
only ever needs one page or one record at a time.
"""

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

from .http import FetchError, HttpClient
from .logger import get_logger
from .schema import validate_starship

SOURCE = "catalog"


class CatalogError(Exception):
    """Raised when the starship list cannot be fetched completely."""


def list_url(base_url: str, search: Optional[str] = None) -> str:
    """Build the list endpoint URL, with ``?search=`` for a non-blank term."""
    term = (search or "").strip()
    if not term:
        return base_url
    return f"{base_url}?{urlencode({'search': term})}"


def _parse_page(data: Any, url: str) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise CatalogError(f"Malformed catalog page (no results list): {url}")
    next_url = data.get("next") or None
    if next_url is not None and not isinstance(next_url, str):
        raise CatalogError(f"Malformed catalog page (bad next link): {url}")
    return data["results"], next_url


def fetch_page(client: HttpClient, url: str) -> Tuple[List[Dict[str, Any]], Optional[str]]:
    """Fetch one list page and return ``(results, next_url)``.

    Raises:
        FetchError: If the request fails
        CatalogError: If the page body is not a catalog page
    """
    data = client.get_json(url, source=SOURCE)
    return _parse_page(data, url)


def fetch_all_starships(client: HttpClient, base_url: str) -> List[Dict[str, Any]]:
    """
    Fetch every starship by following ``next`` links until exhausted.

    Args:
        client: HTTP client
        base_url: First list page

    Returns:
        All records in page order, then within-page order

    Raises:
        CatalogError: If any page fails; no partial list is returned
    """
    logger = get_logger()
    ships: List[Dict[str, Any]] = []
    visited = set()
    next_url: Optional[str] = base_url

    while next_url:
        if next_url in visited:
            raise CatalogError(f"Catalog pagination loops back to {next_url}")
        visited.add(next_url)

        try:
            results, following = fetch_page(client, next_url)
        except FetchError as e:
            logger.error("Catalog page fetch failed", url=next_url, error=str(e))
            raise CatalogError(str(e)) from e

        for record in results:
            errors = validate_starship(record)
            if errors:
                logger.error("Invalid starship record", url=next_url, errors=errors)
                raise CatalogError(f"Invalid starship record on {next_url}: {'; '.join(errors)}")

        ships.extend(results)
        logger.debug("Fetched catalog page", url=next_url, count=len(results))
        next_url = following

    logger.info(f"Fetched {len(ships)} starships", pages=len(visited))
    return ships


def fetch_starship(client: HttpClient, base_url: str, ship_id: int) -> Dict[str, Any]:
    """Fetch one starship record for the detail view.

    Raises:
        FetchError: If the request fails or the body is not a starship
    """
    url = f"{base_url}{ship_id}/"
    data = client.get_json(url, source=SOURCE)
    if not isinstance(data, dict) or not data.get("name"):
        raise FetchError(f"Catalog returned no starship for id {ship_id}")
    return data
