"""
app/domain/concept_catalog.py

In-memory concept catalog loaded once per import run.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class ConceptCatalogEntry:
    code: str
    name: str
    group: str | None = None
    mandatory: bool = False


class ConceptCatalog:
    """
    Immutable lookup over catalog entries keyed by concept code.
    """

    def __init__(self, entries: Iterable[ConceptCatalogEntry]) -> None:
        self._entries: dict[str, ConceptCatalogEntry] = {entry.code: entry for entry in entries}

    @classmethod
    def empty(cls) -> ConceptCatalog:
        return cls(())

    def __contains__(self, code: object) -> bool:
        return code in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, code: str) -> ConceptCatalogEntry | None:
        return self._entries.get(code)

    def mandatory_entries(self) -> list[ConceptCatalogEntry]:
        return sorted(
            (entry for entry in self._entries.values() if entry.mandatory),
            key=lambda entry: entry.code,
        )

    def codes_in_group(self, group: str) -> frozenset[str]:
        return frozenset(code for code, entry in self._entries.items() if entry.group == group)
