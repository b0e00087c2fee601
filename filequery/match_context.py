"""Database entries and the per-entry state used while matching a query."""

from __future__ import annotations

import enum
import locale
import unicodedata
from dataclasses import dataclass
from functools import cached_property
from typing import Optional

DIR_SEPARATOR = "/"


class EntryType(enum.Enum):
    """Kind of database entry."""

    NONE = 0
    FOLDER = 1
    FILE = 2


class IndexType(enum.IntEnum):
    """Columns an entry can be shown and highlighted in."""

    NAME = 0
    PATH = 1
    SIZE = 2
    MODIFICATION_TIME = 3
    EXTENSION = 4
    FILETYPE = 5


def _turkic_locale() -> bool:
    try:
        current = locale.setlocale(locale.LC_CTYPE)
    except locale.Error:
        return False
    return bool(current) and current.startswith(("tr", "az"))


def fold(text: str) -> str:
    """Case fold and decompose ``text`` for case-insensitive comparison."""
    if _turkic_locale():
        text = text.replace("I", "\u0131").replace("\u0130", "i")
    return unicodedata.normalize("NFD", text.casefold())


@dataclass
class Entry:
    """A file or folder: its name, its parent directory path and its metadata."""

    name: str
    parent: str = ""
    type: EntryType = EntryType.FILE
    size: int = 0
    mtime: float = 0

    def extension(self) -> Optional[str]:
        """The text after the last dot of a file name; None for folders."""
        if self.type == EntryType.FOLDER:
            return None
        dot = self.name.rfind(".")
        if dot <= 0:
            return ""
        return self.name[dot + 1:]


@dataclass(frozen=True)
class Highlight:
    """A bold span of text; ``end`` of None reaches to the end of the text."""

    start: int = 0
    end: Optional[int] = None

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError("start must not be negative")
        if self.end is not None and self.end < self.start:
            raise ValueError("end must not precede start")


def _touches(span: Highlight, start: int, end: Optional[int]) -> bool:
    starts_before_end = end is None or span.start <= end
    ends_after_start = span.end is None or start <= span.end
    return starts_before_end and ends_after_start


class MatchContext:
    """Lazily computed strings and collected highlights for one entry."""

    def __init__(self, entry: Optional[Entry]) -> None:
        self._entry = entry
        self._highlights: dict[IndexType, list[Highlight]] = {}

    @property
    def entry(self) -> Optional[Entry]:
        return self._entry

    @property
    def name(self) -> Optional[str]:
        return self._entry.name if self._entry is not None else None

    @cached_property
    def path(self) -> Optional[str]:
        """The full path: parent directory, separator and name."""
        if self._entry is None:
            return None
        return f"{self._entry.parent}{DIR_SEPARATOR}{self._entry.name}"

    @cached_property
    def folded_name(self) -> Optional[str]:
        name = self.name
        return fold(name) if name is not None else None

    @cached_property
    def folded_path(self) -> Optional[str]:
        path = self.path
        return fold(path) if path is not None else None

    def add_highlight(self, highlight: Highlight, index_type: IndexType) -> None:
        """Add a span, merging it with spans it overlaps or touches."""
        start, end = highlight.start, highlight.end
        kept = []
        for span in self._highlights.get(index_type, []):
            if _touches(span, start, end):
                start = min(start, span.start)
                end = None if end is None or span.end is None else max(end, span.end)
            else:
                kept.append(span)
        kept.append(Highlight(start, end))
        kept.sort(key=lambda span: span.start)
        self._highlights[index_type] = kept

    def highlights(self, index_type: IndexType) -> list[Highlight]:
        """The merged spans for a column, in order of their start."""
        return list(self._highlights.get(index_type, []))