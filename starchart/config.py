"""
Runtime settings for the resolver and the browser.

Values come from STARCHART_* environment variables (a .env file is loaded
by the CLI first) and may be overridden by command-line flags.
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_SWAPI_BASE = "https://swapi.dev/api/starships/"
DEFAULT_WIKI_API = "https://starwars.fandom.com/api.php"
DEFAULT_DATABANK_BASE = "https://www.starwars.com/databank/"
DEFAULT_IMAGES_PATH = "public/starship-images.json"
DEFAULT_TIMEOUT = 15.0
DEFAULT_USER_AGENT = "star-wars-app/1.0 (image-mapper)"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    swapi_base: str = DEFAULT_SWAPI_BASE
    wiki_api: str = DEFAULT_WIKI_API
    databank_base: str = DEFAULT_DATABANK_BASE
    images_path: Path = Path(DEFAULT_IMAGES_PATH)
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    log_level: str = "INFO"
    log_dir: Path = Path("logs")

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "timeout" in changes:
            changes["timeout"] = parse_timeout(changes["timeout"])
        if "images_path" in changes:
            changes["images_path"] = Path(changes["images_path"])
        return replace(self, **changes)


def parse_timeout(value) -> float:
    """Parse a request timeout in seconds; must be a positive number."""
    try:
        timeout = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid timeout: {value!r} (expected seconds)")
    if timeout <= 0:
        raise ValueError(f"Invalid timeout: {value!r} (must be positive)")
    return timeout


def parse_log_level(value: str) -> str:
    """Normalise a log level name; only the standard levels are accepted."""
    level = (value or "").strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {value!r} (expected one of {', '.join(LOG_LEVELS)})")
    return level


def _ensure_trailing_slash(url: str) -> str:
    return url if url.endswith("/") else url + "/"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        Settings instance

    Raises:
        ValueError: If STARCHART_TIMEOUT is not a positive number
            or STARCHART_LOG_LEVEL is not a standard level name
    """
    env = os.environ if environ is None else environ

    timeout = DEFAULT_TIMEOUT
    if env.get("STARCHART_TIMEOUT"):
        timeout = parse_timeout(env["STARCHART_TIMEOUT"])

    return Settings(
        swapi_base=_ensure_trailing_slash(env.get("STARCHART_SWAPI_BASE") or DEFAULT_SWAPI_BASE),
        wiki_api=env.get("STARCHART_WIKI_API") or DEFAULT_WIKI_API,
        databank_base=_ensure_trailing_slash(env.get("STARCHART_DATABANK_BASE") or DEFAULT_DATABANK_BASE),
        images_path=Path(env.get("STARCHART_IMAGES_PATH") or DEFAULT_IMAGES_PATH),
        timeout=timeout,
        user_agent=env.get("STARCHART_USER_AGENT") or DEFAULT_USER_AGENT,
        log_level=parse_log_level(env.get("STARCHART_LOG_LEVEL") or "INFO"),
        log_dir=Path(env.get("STARCHART_LOG_DIR") or "logs"),
    )
