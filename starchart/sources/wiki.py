"""
Primary image source: the Star Wars wiki's MediaWiki API.

Direct page titles are tried first; when none of them has a page image,
full-text search results are tried in rank order.
"""

from functools import partial
from typing import Iterator, List

from ..cascade import Attempt, first_hit
from ..config import DEFAULT_WIKI_API
from ..http import HttpClient

SOURCE = "wiki"
SEARCH_LIMIT = 5
THUMB_SIZE = 900


def title_candidates(name: str) -> List[str]:
    return [
        name,
        f"{name} (starship)",
        f"{name} (starship class)",
        f"{name} (Star Wars)",
    ]


def search_queries(name: str) -> List[str]:
    return [
        f"incategory:Starships {name}",
        f'incategory:"Starships" {name}',
        f"{name} starship",
    ]


def page_image(client: HttpClient, api: str, title: str) -> str:
    """Return the page image for ``title``: thumbnail, else original, else ""."""
    params = {
        "action": "query",
        "prop": "pageimages",
        "titles": title,
        "pithumbsize": THUMB_SIZE,
        "piprop": "thumbnail|original",
        "format": "json",
    }
    data = client.get_json(api, params=params, source=SOURCE)
    pages = (data.get("query") or {}).get("pages") or {}
    if not pages:
        return ""
    first = next(iter(pages.values())) or {}
    thumbnail = first.get("thumbnail") or {}
    original = first.get("original") or {}
    return thumbnail.get("source") or original.get("source") or ""


def search_titles(client: HttpClient, api: str, query: str, limit: int = SEARCH_LIMIT) -> List[str]:
    """Return up to ``limit`` result titles for a full-text search."""
    params = {
        "action": "query",
        "list": "search",
        "srsearch": query,
        "srlimit": limit,
        "format": "json",
    }
    data = client.get_json(api, params=params, source=SOURCE)
    results = (data.get("query") or {}).get("search") or []
    titles = [r.get("title") for r in results if isinstance(r, dict) and r.get("title")]
    return titles[:limit]


def _search_hit(client: HttpClient, api: str, query: str) -> str:
    titles = search_titles(client, api, query)
    return first_hit(
        (partial(page_image, client, api, t) for t in titles),
        label="wiki search result",
    )


def _attempts(client: HttpClient, name: str, api: str) -> Iterator[Attempt]:
    for title in title_candidates(name):
        yield partial(page_image, client, api, title)
    for query in search_queries(name):
        yield partial(_search_hit, client, api, query)


def fetch_wiki_image(client: HttpClient, name: str, api: str = DEFAULT_WIKI_API) -> str:
    """Find an image for ``name`` on the wiki, or "" when there is none."""
    return first_hit(_attempts(client, name, api), label="wiki")
