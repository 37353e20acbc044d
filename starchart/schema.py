import re
from typing import Any, Dict, List, Optional
from urllib.parse import urlparse

REQUIRED_STR_FIELDS = ["name", "url"]

_STARSHIP_ID_RE = re.compile(r"/starships/(\d+)/?$")


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _valid_url(v: str) -> bool:
    try:
        p = urlparse(v)
        return bool(p.scheme and p.netloc)
    except ValueError:
        return False


def validate_starship(data: Any) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.

    Only the fields the resolver relies on are checked: ``name`` is the
    join key of the image mapping and ``url`` carries the starship id.
    """
    if not isinstance(data, dict):
        return ["Starship record must be a JSON object"]

    errors: List[str] = []
    for f in REQUIRED_STR_FIELDS:
        if f not in data:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")

    if _is_non_empty_str(data.get("url")) and not _valid_url(data["url"]):
        errors.append("Field 'url' must be a valid absolute URL (scheme + host)")

    return errors


def starship_id(url: Optional[str]) -> Optional[int]:
    """Extract the numeric id from a ``.../starships/<id>/`` URL."""
    if not url:
        return None
    match = _STARSHIP_ID_RE.search(url)
    return int(match.group(1)) if match else None
