"""Typed failures raised by the catalog adapters and the overview service.

Every error carries a human-readable ``message`` suitable for showing to the
user as-is. Task cancellation is not modelled here: it surfaces as
``asyncio.CancelledError`` and is swallowed by whoever initiated it.
"""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for all catalog and collaborator failures."""

    default_message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCredential(CatalogError):
    """No API key is configured; the request was never attempted."""

    default_message = "API key not found. Add it to your .env file."


class InvalidRequest(CatalogError):
    """The request could not be built (bad URL or invalid arguments)."""

    default_message = "Invalid request."


class TransportFailure(CatalogError):
    """The server could not be reached."""

    default_message = "Could not reach the server. Check your internet connection."


class RemoteStatusError(CatalogError):
    """The server answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str | None = None) -> None:
        self.status_code = status_code
        super().__init__(message or f"HTTP error: {status_code}")


class DecodeFailure(CatalogError):
    """The server answered, but the payload did not match the expected shape."""

    default_message = "Unexpected response from the server."


class EncodeFailure(CatalogError):
    """The outgoing request body could not be serialized."""

    default_message = "Failed to encode request."


class NoContent(CatalogError):
    """The text-generation service returned no usable content."""

    default_message = "No content received from API."
