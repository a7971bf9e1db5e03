"""Abstract base class for catalog API adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, TypeVar

import requests

from ..config import config
from ..errors import (
    DecodeFailure,
    InvalidRequest,
    MissingCredential,
    RemoteStatusError,
    TransportFailure,
)
from ..models import PageResponse

T = TypeVar("T")

_logger = logging.getLogger(__name__)

_LEVELS = {"INFO": logging.INFO, "WARN": logging.WARNING, "ERROR": logging.ERROR}


class CatalogAdapter(ABC):
    """
    Abstract base class for museum catalog adapters.

    Subclasses expose typed, paginated endpoint methods while this base class
    owns the HTTP session, credential check, error mapping and logging.
    Every failure is raised as a ``CatalogError`` subclass; nothing is
    retried or cached.
    """

    # Subclasses must define these
    name: str = "Unknown Museum"  # Full display name
    short_name: str = "UNK"  # Short identifier (e.g., "HAM")
    base_url: str = ""

    # Timeouts (can be overridden)
    fetch_timeout: int = config.FETCH_TIMEOUT

    # Logging callback - set by app to integrate with UI logging
    _log_callback: Callable[[str, str], None] | None = None

    def __init__(
        self,
        api_key: str | None = None,
        session: requests.Session | None = None,
        base_url: str | None = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else self.default_api_key()
        self.session = session or self._create_session()
        if base_url is not None:
            self.base_url = base_url

    @abstractmethod
    def default_api_key(self) -> str:
        """Return the configured API key, or an empty string when unset."""

    @staticmethod
    def _create_session() -> requests.Session:
        s = requests.Session()
        s.headers.update({"User-Agent": "ArtExplorer/1.0", "Accept": "application/json"})
        return s

    def set_logger(self, callback: Callable[[str, str], None]) -> None:
        """Set logging callback. Signature: callback(level, message)."""
        self._log_callback = callback

    def _log(self, level: str, message: str) -> None:
        message = f"[{self.short_name}] {message}"
        if self._log_callback:
            self._log_callback(level, message)
        else:
            _logger.log(_LEVELS.get(level, logging.INFO), message)

    def _log_info(self, message: str) -> None:
        self._log("INFO", message)

    def _log_warning(self, message: str) -> None:
        self._log("WARN", message)

    def _log_error(self, message: str) -> None:
        self._log("ERROR", message)

    @staticmethod
    def check_paging(page: int, size: int) -> None:
        """Reject page numbers below 1 and non-positive page sizes."""
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise InvalidRequest(f"Invalid page number: {page!r}")
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise InvalidRequest(f"Invalid page size: {size!r}")

    @staticmethod
    def check_entity_id(entity_id: int, label: str = "id") -> None:
        if isinstance(entity_id, bool) or not isinstance(entity_id, int) or entity_id < 1:
            raise InvalidRequest(f"Invalid {label}: {entity_id!r}")

    def fetch_page(
        self,
        endpoint: str,
        params: dict[str, Any],
        parse_record: Callable[[dict[str, Any]], T],
    ) -> PageResponse[T]:
        """
        GET ``endpoint`` and decode a ``{info, records}`` page.

        Args:
            endpoint: Path relative to ``base_url`` (e.g. "/object")
            params: Query parameters, without the API key
            parse_record: Builds one typed record from its JSON object

        Raises:
            MissingCredential: no API key configured; nothing is sent
            InvalidRequest: the URL could not be built
            TransportFailure: network-level failure or timeout
            RemoteStatusError: non-2xx status
            DecodeFailure: body is not JSON or not the expected shape
        """
        if not self.api_key:
            self._log_error("API key missing; request not sent")
            raise MissingCredential(f"{self.name} API key not found. Set HAM_API_KEY in .env.")

        url = f"{self.base_url}{endpoint}"
        query = {"apikey": self.api_key, **params}
        self._log_info(f"GET {endpoint} {_describe(params)}")

        try:
            response = self.session.get(url, params=query, timeout=self.fetch_timeout)
            response.raise_for_status()

        except requests.Timeout:
            self._log_error(f"Timeout after {self.fetch_timeout}s")
            raise TransportFailure(f"{self.name} took too long to respond. Try again.") from None

        except requests.ConnectionError:
            self._log_error("Connection failed")
            raise TransportFailure(f"Could not connect to {self.name}. Check your internet connection.") from None

        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else 0
            self._log_error(f"HTTP error: {status}")
            raise RemoteStatusError(status) from e

        except (requests.exceptions.InvalidURL,
                requests.exceptions.MissingSchema,
                requests.exceptions.InvalidSchema) as e:
            self._log_error(f"Invalid URL {url}: {e}")
            raise InvalidRequest(f"Invalid URL: {url}") from e

        except requests.RequestException as e:
            self._log_error(f"Request error: {e}")
            raise TransportFailure(f"Error communicating with {self.name}. Try again.") from e

        try:
            page = PageResponse.from_dict(response.json(), parse_record)
        except (ValueError, KeyError, TypeError) as e:
            self._log_error(f"Decoding error for {endpoint}: {type(e).__name__}: {e}")
            self._log_warning(f"Response body (first 500 chars): {response.text[:500]}")
            raise DecodeFailure(f"Could not read the response from {self.name}.") from e

        self._log_info(
            f"Received {len(page.records)} records "
            f"(page {page.info.page}/{page.info.pages}, total {page.info.total_records})"
        )
        return page


def _describe(params: dict[str, Any]) -> str:
    return " ".join(f"{k}={v}" for k, v in params.items())
