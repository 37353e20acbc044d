"""Shared HTTP client for the catalog, wiki and databank sources."""

from typing import Any, Dict, Optional

import requests

from .config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .logger import get_logger


class FetchError(ValueError):
    """Raised when a request fails or returns an unusable body."""


class HttpClient:
    """
    Thin wrapper around a requests.Session.

    Every call is a single attempt bounded by ``timeout``; failures are
    logged, counted and re-raised as FetchError.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": user_agent})

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    def _get(self, url: str, params: Optional[Dict[str, Any]], source: str) -> requests.Response:
        logger = get_logger()
        logger.record_request()
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "HTTPError"
            logger.record_error(f"HTTPError_{status}")
            if status == 404:
                logger.debug(f"{source.capitalize()} page not found", url=url, status=404)
                raise FetchError(f"{source.capitalize()} URL not found (404): {url}")
            logger.warning(f"{source.capitalize()} request failed", url=url, status=status)
            raise FetchError(f"{source.capitalize()} request failed ({status}): {url}")
        except requests.exceptions.Timeout:
            logger.record_error("Timeout")
            logger.warning(f"{source.capitalize()} request timed out", url=url, timeout=self.timeout)
            raise FetchError(f"{source.capitalize()} request timed out: {url}")
        except requests.exceptions.RequestException as e:
            logger.record_error("RequestException")
            logger.warning(f"{source.capitalize()} request error", url=url, error=str(e))
            raise FetchError(f"{source.capitalize()} request error: {e}")

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None, source: str = "http") -> Any:
        """Fetch URL and decode the body as JSON.

        Raises:
            FetchError: On any HTTP error, timeout, request failure or invalid JSON
        """
        resp = self._get(url, params, source)
        try:
            return resp.json()
        except ValueError:
            get_logger().record_error("InvalidJSON")
            raise FetchError(f"{source.capitalize()} returned invalid JSON: {url}")

    def get_text(self, url: str, params: Optional[Dict[str, Any]] = None, source: str = "http") -> str:
        """Fetch URL and return the raw body text.

        Raises:
            FetchError: On any HTTP error, timeout or request failure
        """
        return self._get(url, params, source).text
