"""Typed view of the ``offvocal`` settings block."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Tuple

from core.settings import DEFAULT_KEYWORDS

LOGGER = logging.getLogger("offvocal.config")

KEYWORD_SEPARATOR = "|"


class ExecutionMode(str, Enum):
    """Safety switch: ``AUDIT`` only logs matches, ``DESTRUCTIVE`` deletes them."""

    AUDIT = "Audit"
    DESTRUCTIVE = "Destructive"

    @classmethod
    def parse(cls, value: Any) -> "ExecutionMode":
        if isinstance(value, cls):
            return value
        text = str(value or "").strip()
        for mode in cls:
            if text.lower() == mode.value.lower():
                return mode
        if text:
            LOGGER.warning("Unknown execution mode %r; falling back to %s", text, cls.AUDIT.value)
        return cls.AUDIT


def split_keywords(raw: str) -> Tuple[str, ...]:
    """Split a pipe-delimited keyword string.

    Empty segments and duplicates are kept so that joining the result with
    ``|`` gives back ``raw`` unchanged.
    """

    return tuple(raw.split(KEYWORD_SEPARATOR))


@dataclass(frozen=True, slots=True)
class ScanConfiguration:
    execution_mode: ExecutionMode = ExecutionMode.AUDIT
    selected_libraries: Tuple[str, ...] = ()
    keywords: Tuple[str, ...] = split_keywords(DEFAULT_KEYWORDS)

    @property
    def destructive(self) -> bool:
        return self.execution_mode is ExecutionMode.DESTRUCTIVE

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any] | None) -> "ScanConfiguration":
        data = dict(mapping or {})
        raw_keywords = data.get("keywords", DEFAULT_KEYWORDS)
        if not isinstance(raw_keywords, str):
            LOGGER.warning("Keyword setting is not a string (%r); using defaults", type(raw_keywords).__name__)
            raw_keywords = DEFAULT_KEYWORDS
        raw_libraries = data.get("selected_libraries") or ()
        if isinstance(raw_libraries, str):
            raw_libraries = (raw_libraries,)
        libraries = tuple(str(name) for name in raw_libraries if name is not None)
        return cls(
            execution_mode=ExecutionMode.parse(data.get("execution_mode")),
            selected_libraries=libraries,
            keywords=split_keywords(raw_keywords),
        )

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "ScanConfiguration":
        raw = settings.get("offvocal")
        return cls.from_mapping(raw if isinstance(raw, Mapping) else {})


__all__ = [
    "ExecutionMode",
    "KEYWORD_SEPARATOR",
    "ScanConfiguration",
    "split_keywords",
]
