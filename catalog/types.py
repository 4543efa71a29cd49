"""Value types shared by catalog clients and the cleanup pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import FrozenSet, Optional


class ItemKind(str, Enum):
    AUDIO = "Audio"
    AUDIO_BOOK = "AudioBook"
    RECORDING = "Recording"
    MUSIC_VIDEO = "MusicVideo"


AUDIO_ITEM_KINDS: FrozenSet[ItemKind] = frozenset(
    {ItemKind.AUDIO, ItemKind.AUDIO_BOOK, ItemKind.RECORDING, ItemKind.MUSIC_VIDEO}
)


@dataclass(frozen=True, slots=True)
class LibraryScope:
    """Parent restriction for a query; ``parent_id=None`` means the whole catalog."""

    parent_id: Optional[str] = None

    @classmethod
    def scoped(cls, parent_id: str) -> "LibraryScope":
        return cls(parent_id=parent_id)

    def __str__(self) -> str:
        return "all" if self.parent_id is None else self.parent_id


GLOBAL_SCOPE = LibraryScope()


@dataclass(frozen=True, slots=True)
class LibraryRoot:
    name: str
    id: Optional[str]


@dataclass(frozen=True, slots=True)
class CatalogItem:
    """A catalog entry matched by a query. Equality is by catalog id only."""

    id: str
    path: Optional[str] = field(default=None, compare=False)
    name: Optional[str] = field(default=None, compare=False)

    def __str__(self) -> str:
        return self.name or self.id


@dataclass(frozen=True, slots=True)
class ItemQuery:
    scope: LibraryScope
    keyword: str
    recursive: bool = True
    exclude_virtual: bool = True
    item_types: FrozenSet[ItemKind] = AUDIO_ITEM_KINDS
    media_type: str = "Audio"
    source: str = "Library"
    offset: int = 0
    limit: int = 100

    def at(self, offset: int) -> "ItemQuery":
        return replace(self, offset=int(offset))


@dataclass(frozen=True, slots=True)
class DeleteOptions:
    remove_file_from_disk: bool = True


__all__ = [
    "AUDIO_ITEM_KINDS",
    "CatalogItem",
    "DeleteOptions",
    "GLOBAL_SCOPE",
    "ItemKind",
    "ItemQuery",
    "LibraryRoot",
    "LibraryScope",
]
