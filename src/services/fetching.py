"""
HTTP transport for listing and detail pages. Wraps a `requests.Session` with a retry
adapter and maps transport failures onto a small error taxonomy so callers can
decide between skipping a candidate and aborting a run.
"""

from __future__ import annotations

import logging
import threading

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

LOGGER = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/142.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "bg-BG,bg;q=0.9,en;q=0.8",
}
RETRY_STATUSES = (429, 500, 502, 503, 504)


class FetchError(RuntimeError):
    retryable = True

    def __init__(self, url: str, message: str) -> None:
        super().__init__(f"{message} ({url})")
        self.url = url


class FetchTimeoutError(FetchError):
    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(url, f"Request timed out after {timeout}s")
        self.timeout = timeout


class HttpStatusError(FetchError):
    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(url, f"HTTP {status_code}")
        self.status_code = status_code
        self.retryable = status_code in RETRY_STATUSES


class NetworkError(FetchError):
    pass


def make_session(max_retries: int = 3, backoff_factor: float = 0.6) -> requests.Session:
    session = requests.Session()
    retries = Retry(
        total=max_retries,
        read=False,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUSES,
        allowed_methods=frozenset(["GET"]),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retries)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    session.headers.update(DEFAULT_HEADERS)
    return session


class HttpFetcher:
    """Fetch raw page text, raising `FetchError` subclasses on failure."""

    def __init__(
        self,
        session: requests.Session | None = None,
        timeout: float = 15,
        max_retries: int = 3,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self._shared_session = session
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        """Injected session, or one lazily built per calling thread."""
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = make_session(max_retries=self.max_retries)
            self._local.session = session
        return session

    def fetch(self, url: str) -> str:
        LOGGER.debug("GET %s", url)
        try:
            response = self.session.get(url, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
        except requests.Timeout as exc:
            raise FetchTimeoutError(url, self.timeout) from exc
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else 0
            raise HttpStatusError(url, status) from exc
        except requests.RequestException as exc:
            raise NetworkError(url, str(exc) or exc.__class__.__name__) from exc
        # Servers that omit the charset make requests fall back to Latin-1.
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = response.apparent_encoding
        return response.text
