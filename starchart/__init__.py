"""starchart: starship catalog browser and offline image resolver."""

__version__ = "0.1.0"
