"""
Terminal catalog browser.

Lists starships page by page, filters by search term, shows one starship
in detail, and joins the resolver's image mapping by name. Each view is
built from an immutable state object so the "no results", "loading" and
"error" cases stay distinct.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .catalog import CatalogError, fetch_page, fetch_starship
from .http import FetchError, HttpClient
from .logger import get_logger
from .schema import starship_id

LOADING = "loading"
ERROR = "error"
EMPTY = "empty"
LOADED = "loaded"

LIST_ERROR_MESSAGE = "Could not load starships. Please try again."
DETAIL_ERROR_MESSAGE = "Could not load details. Please try again."
EMPTY_MESSAGE = "No results found."
LOADING_MESSAGE = "Loading..."
UNKNOWN = "Unknown"

DETAIL_FIELDS = [
    ("manufacturer", "Manufacturer"),
    ("passengers", "Passengers"),
    ("max_atmosphering_speed", "Max atmosphering speed"),
    ("crew", "Crew"),
    ("cargo_capacity", "Cargo capacity"),
]


@dataclass(frozen=True)
class ListingState:
    status: str = LOADING
    items: List[Dict[str, Any]] = field(default_factory=list)
    next_url: Optional[str] = None
    query: str = ""
    error: str = ""

    @property
    def has_more(self) -> bool:
        return self.status == LOADED and bool(self.next_url)


@dataclass(frozen=True)
class DetailState:
    status: str = LOADING
    starship: Optional[Dict[str, Any]] = None
    error: str = ""


def format_value(value: Any) -> str:
    if value is None:
        return UNKNOWN
    text = str(value).strip()
    if not text or text.lower() in ("unknown", "n/a"):
        return UNKNOWN
    return text


def _hash_string(value: str) -> int:
    # 32-bit rolling hash (h * 31 + code unit) over UTF-16 code units.
    h = 0
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        h = (h * 31 + code) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


_SHIP_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 640 360">'
    '<defs>'
    '<linearGradient id="g" x1="0" y1="0" x2="1" y2="1">'
    '<stop offset="0%" stop-color="{dark}"/><stop offset="100%" stop-color="#0b0c12"/>'
    '</linearGradient>'
    '<radialGradient id="glow" cx="0.2" cy="0.1" r="0.8">'
    '<stop offset="0%" stop-color="{accent}" stop-opacity="0.7"/>'
    '<stop offset="100%" stop-color="{accent}" stop-opacity="0"/>'
    '</radialGradient>'
    '</defs>'
    '<rect width="640" height="360" rx="24" fill="url(#g)"/>'
    '<rect width="640" height="360" rx="24" fill="url(#glow)"/>'
    '<g transform="translate(100 120)" fill="#e6e7f0">'
    '<path d="M60 30c40-30 160-40 260-10 30 9 60 27 80 46 12 12 20 30 20 44 0 18-10 36-26 46'
    '-36 22-96 30-178 22-70-7-134-28-170-48-24-14-34-32-34-47 0-19 16-39 48-53z" opacity="0.92"/>'
    '<path d="M120 70h100c20 0 40 8 52 18l24 18-32 16H140l-24-14c-8-5-12-12-12-18 0-11 8-20 16-20z" fill="#cfd3e6"/>'
    '<circle cx="300" cy="96" r="18" fill="{accent}"/>'
    '<rect x="40" y="96" width="60" height="18" rx="9" fill="{accent}"/>'
    '</g>'
    '</svg>'
)


def fallback_image(name: Optional[str]) -> str:
    """Deterministic SVG placeholder, tinted by a hash of the name."""
    hue = _hash_string(name or "ship") % 360
    svg = _SHIP_SVG.format(
        accent=f"hsl({hue}, 70%, 65%)",
        dark=f"hsl({(hue + 24) % 360}, 50%, 30%)",
    )
    return "data:image/svg+xml;utf8," + quote(svg, safe="")


def image_for(ship: Dict[str, Any], mapping: Dict[str, str]) -> str:
    name = ship.get("name") or ""
    return mapping.get(name) or fallback_image(name)


def summary_label(query: str) -> str:
    if not query:
        return "Starships in the galactic fleet"
    return f'Starships matching "{query}"'


def load_listing(
    client: HttpClient,
    url: str,
    previous: Optional[ListingState] = None,
    append: bool = False,
    query: str = "",
) -> ListingState:
    """
    Fetch one list page and return the resulting state.

    ``append`` keeps the previous items (load more). A failed request keeps
    nothing from the new page and reports the error; there is no retry.
    """
    if previous is not None and not query:
        query = previous.query
    kept = list(previous.items) if (append and previous is not None) else []

    try:
        results, next_url = fetch_page(client, url)
    except (FetchError, CatalogError) as e:
        get_logger().warning("Starship list request failed", url=url, error=str(e))
        return ListingState(status=ERROR, items=kept, query=query, error=LIST_ERROR_MESSAGE)

    items = kept + list(results)
    status = LOADED if items else EMPTY
    return ListingState(status=status, items=items, next_url=next_url, query=query)


def load_detail(client: HttpClient, base_url: str, ship_id: int) -> DetailState:
    try:
        ship = fetch_starship(client, base_url, ship_id)
    except FetchError as e:
        get_logger().warning("Starship detail request failed", id=ship_id, error=str(e))
        return DetailState(status=ERROR, error=DETAIL_ERROR_MESSAGE)
    return DetailState(status=LOADED, starship=ship)


def _route(ship: Dict[str, Any]) -> str:
    ship_id = starship_id(ship.get("url"))
    return f"/starships/{ship_id}" if ship_id is not None else "/"


def render_listing(state: ListingState, mapping: Dict[str, str]) -> str:
    lines = ["STAR WARS", summary_label(state.query), ""]

    if state.status == ERROR:
        lines.append(state.error)
    elif state.status == LOADING:
        lines.append(LOADING_MESSAGE)
    elif state.status == EMPTY:
        lines.append(EMPTY_MESSAGE)

    for ship in state.items:
        lines.append(f"{ship.get('name')}  [{_route(ship)}]")
        lines.append(f"  Model: {format_value(ship.get('model'))}")
        lines.append(
            f"  Max speed: {format_value(ship.get('max_atmosphering_speed'))}"
            f"  Crew: {format_value(ship.get('crew'))}"
        )
        lines.append(f"  Image: {image_for(ship, mapping)}")

    if state.has_more:
        lines.append("")
        lines.append(f"More results: {state.next_url}")
    return "\n".join(lines)


def render_detail(state: DetailState, mapping: Dict[str, str]) -> str:
    lines = ["<- Back to list [/]"]
    if state.status == LOADING:
        lines.append(LOADING_MESSAGE)
        return "\n".join(lines)
    if state.status == ERROR:
        lines.append(state.error)
        return "\n".join(lines)

    ship = state.starship or {}
    lines.append(ship.get("name") or UNKNOWN)
    lines.append(format_value(ship.get("model")))
    lines.append(f"Image: {image_for(ship, mapping)}")
    lines.append("")
    for key, label in DETAIL_FIELDS:
        lines.append(f"{label}: {format_value(ship.get(key))}")
    return "\n".join(lines)
