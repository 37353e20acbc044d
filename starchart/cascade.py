"""
Short-circuit evaluation of lookup attempts.

A lookup is a list (or generator) of zero-argument callables. They are
called in order and the first non-empty string wins; a failing attempt
only moves evaluation on to the next one.
"""

from typing import Callable, Iterable

import requests

from .logger import get_logger

Attempt = Callable[[], str]

# FetchError is a ValueError; JSON and shape errors from a source land here too.
SWALLOWED_ERRORS = (
    ValueError,
    KeyError,
    TypeError,
    AttributeError,
    requests.exceptions.RequestException,
)


def first_hit(attempts: Iterable[Attempt], label: str = "lookup") -> str:
    """
    Return the first non-empty result of ``attempts``.

    Args:
        attempts: Callables evaluated lazily, in order
        label: Name used in debug logs

    Returns:
        The first non-empty string, or "" when every attempt missed or failed
    """
    logger = get_logger()
    for index, attempt in enumerate(attempts):
        try:
            result = attempt()
        except SWALLOWED_ERRORS as e:
            logger.debug(f"{label} attempt failed", attempt=index, error=str(e))
            continue
        if result:
            return result
    return ""
