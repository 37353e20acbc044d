import json
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from .http import FetchError, HttpClient
from .logger import get_logger


def _clean_mapping(data: Any) -> Dict[str, str]:
    if not isinstance(data, dict):
        return {}
    return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}


def load_mapping(path: Path) -> Dict[str, str]:
    """Read the image mapping; missing or unreadable files give ``{}``."""
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            content = f.read().strip()
            if not content:
                return {}
            return _clean_mapping(json.loads(content))
    except (json.JSONDecodeError, OSError) as e:
        get_logger().warning("Image mapping unreadable, using fallbacks", path=str(path), error=str(e))
        return {}


def load_mapping_url(client: HttpClient, url: str) -> Dict[str, str]:
    """Fetch a published image mapping; any failure gives ``{}``."""
    try:
        return _clean_mapping(client.get_json(url, source="artifact"))
    except FetchError as e:
        get_logger().warning("Image mapping unavailable, using fallbacks", url=url, error=str(e))
        return {}


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def save_mapping(path: Path, mapping: Dict[str, str]) -> None:
    """Write the mapping in one step.

    The JSON goes to a temporary file next to ``path`` which then replaces
    it, so readers never see a half-written file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(mapping, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.chmod(tmp_name, 0o666 & ~_current_umask())
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
