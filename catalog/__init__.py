"""Catalog access for the off-vocal cleanup job."""
from __future__ import annotations

from .client import CatalogClient
from .errors import CatalogError
from .jellyfin import CatalogSettings, JellyfinCatalogClient
from .types import (
    AUDIO_ITEM_KINDS,
    GLOBAL_SCOPE,
    CatalogItem,
    DeleteOptions,
    ItemKind,
    ItemQuery,
    LibraryRoot,
    LibraryScope,
)

__all__ = [
    "AUDIO_ITEM_KINDS",
    "CatalogClient",
    "CatalogError",
    "CatalogItem",
    "CatalogSettings",
    "DeleteOptions",
    "GLOBAL_SCOPE",
    "ItemKind",
    "ItemQuery",
    "JellyfinCatalogClient",
    "LibraryRoot",
    "LibraryScope",
]
