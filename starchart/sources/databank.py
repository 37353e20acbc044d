"""
Secondary image source: the official databank site.

Pages are addressed by slug. The image is taken from the raw HTML by
matching the databank CDN URL rather than parsing the markup.
"""

import re
from functools import partial

from ..cascade import first_hit
from ..config import DEFAULT_DATABANK_BASE
from ..http import HttpClient
from ..slugs import databank_slug, slug_candidates

SOURCE = "databank"

CDN_IMAGE_RE = re.compile(r"https://lumiere-a\.akamaihd\.net/[^\"'\s)]+", re.IGNORECASE)


def extract_databank_image(html: str) -> str:
    """First CDN image URL in ``html``, or ""."""
    match = CDN_IMAGE_RE.search(html or "")
    return match.group(0) if match else ""


def _page_image(client: HttpClient, url: str) -> str:
    return extract_databank_image(client.get_text(url, source=SOURCE))


def fetch_databank_image(client: HttpClient, name: str, base: str = DEFAULT_DATABANK_BASE) -> str:
    """Try each slug candidate's databank page; "" when none has an image."""
    candidates = slug_candidates(databank_slug(name))
    return first_hit(
        (partial(_page_image, client, f"{base}{c}") for c in candidates),
        label="databank",
    )
