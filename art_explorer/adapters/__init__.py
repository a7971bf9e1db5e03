"""Catalog adapter registry and utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .base import CatalogAdapter

# Registry of available adapters
_ADAPTERS: dict[str, type[CatalogAdapter]] = {}


def register(cls: type["CatalogAdapter"]) -> type["CatalogAdapter"]:
    """Decorator to register an adapter class."""
    _ADAPTERS[cls.short_name] = cls
    return cls


def get_adapter(short_name: str, **kwargs: Any) -> "CatalogAdapter":
    """Get an adapter instance by short name (e.g., 'HAM').

    Keyword arguments (``api_key``, ``session``, ``base_url``) are passed to
    the adapter constructor.
    """
    if short_name not in _ADAPTERS:
        available = ", ".join(_ADAPTERS.keys()) or "none"
        raise ValueError(f"Unknown adapter: {short_name}. Available: {available}")
    return _ADAPTERS[short_name](**kwargs)


def list_adapters() -> list[tuple[str, str]]:
    """Return list of (short_name, full_name) tuples for all registered adapters."""
    return [(name, cls.name) for name, cls in _ADAPTERS.items()]


# Import adapters to trigger registration
# These imports must come after the registry is defined
from .harvard import HarvardArtAdapter  # noqa: E402, F401
