"""Image sources consulted by the resolver, in cascade order."""

from .wiki import fetch_wiki_image
from .databank import fetch_databank_image

__all__ = ["fetch_wiki_image", "fetch_databank_image"]
