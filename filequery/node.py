"""Query nodes: the single terms of a query and how they match entries."""

from __future__ import annotations

import abc
import enum
import logging
import re
import string
from typing import Iterable, Optional

from filequery.match_context import (
    DIR_SEPARATOR,
    Highlight,
    IndexType,
    MatchContext,
)
from filequery.tokens import QueryFlag

_log = logging.getLogger(__name__)

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

_WILDCARD_ESCAPED = set(".^$+()[]{\\|")


def _ascii_lower(text: str) -> str:
    return text.translate(_ASCII_LOWER)


class Comparison(enum.Enum):
    """How a size term compares an entry's size."""

    EQUAL = 0
    GREATER = 1
    GREATER_EQ = 2
    SMALLER = 3
    SMALLER_EQ = 4
    RANGE = 5


class Operator(enum.Enum):
    """Boolean operators joining query terms."""

    AND = 0
    OR = 1
    NOT = 2


class Node(abc.ABC):
    """A single term of a query."""

    def __init__(self, flags: QueryFlag = QueryFlag.NONE) -> None:
        self.flags = flags

    @abc.abstractmethod
    def search(self, context: MatchContext) -> bool:
        """Whether the entry of ``context`` matches this term."""

    def highlight(self, context: MatchContext) -> bool:
        """Match like ``search`` and record the matching spans in ``context``."""
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(flags={self.flags!r})"


class OperatorNode(Node):
    """An AND, OR or NOT that joins the nodes below it in a tree."""

    def __init__(self, operator: Operator) -> None:
        super().__init__(QueryFlag.NONE)
        self.operator = Operator(operator)

    def search(self, context: MatchContext) -> bool:
        raise TypeError("operator nodes are evaluated through their query tree")

    def __repr__(self) -> str:
        return f"OperatorNode({self.operator.name})"


class MatchEverythingNode(Node):
    """A term that every entry matches."""

    def search(self, context: MatchContext) -> bool:
        return True


class SizeNode(Node):
    """Compares the size of an entry with a value or a range."""

    def __init__(
        self,
        size: int,
        size_upper_limit: int = 0,
        comparison: Comparison = Comparison.EQUAL,
        flags: QueryFlag = QueryFlag.NONE,
    ) -> None:
        super().__init__(flags)
        self.size = size
        self.size_upper_limit = size_upper_limit
        self.comparison = comparison

    def search(self, context: MatchContext) -> bool:
        entry = context.entry
        if entry is None:
            return False
        size = entry.size
        if self.comparison is Comparison.EQUAL:
            return size == self.size
        if self.comparison is Comparison.GREATER:
            return size > self.size
        if self.comparison is Comparison.SMALLER:
            return size < self.size
        if self.comparison is Comparison.GREATER_EQ:
            return size >= self.size
        if self.comparison is Comparison.SMALLER_EQ:
            return size <= self.size
        return self.size <= size <= self.size_upper_limit

    def highlight(self, context: MatchContext) -> bool:
        if not self.search(context):
            return False
        context.add_highlight(Highlight(), IndexType.SIZE)
        return True

    def __repr__(self) -> str:
        return (
            f"SizeNode({self.size}, {self.size_upper_limit}, "
            f"{self.comparison.name}, flags={self.flags!r})"
        )


class ExtensionNode(Node):
    """Matches entries whose extension is one of a list."""

    def __init__(self, extensions: Iterable[str], flags: QueryFlag = QueryFlag.NONE) -> None:
        super().__init__(flags)
        self.extensions = list(extensions)

    def search(self, context: MatchContext) -> bool:
        entry = context.entry
        if entry is None:
            return False
        ext = entry.extension()
        if ext is None:
            return False
        if QueryFlag.MATCH_CASE in self.flags:
            return any(ext == candidate for candidate in self.extensions)
        folded = _ascii_lower(ext)
        return any(folded == _ascii_lower(candidate) for candidate in self.extensions)

    def highlight(self, context: MatchContext) -> bool:
        if not self.search(context):
            return False
        name = context.name
        if name is None:
            return False
        ext = context.entry.extension()
        context.add_highlight(Highlight(len(name) - len(ext), None), IndexType.NAME)
        context.add_highlight(Highlight(), IndexType.EXTENSION)
        return True

    def __repr__(self) -> str:
        return f"ExtensionNode({self.extensions!r}, flags={self.flags!r})"


def _add_path_highlight(context: MatchContext, start: int, length: int) -> None:
    # A match in the full path may cover the parent path, the name or both.
    name = context.name or ""
    path = context.path or ""
    parent_len = len(path) - len(name)
    if start > parent_len:
        name_start = start - parent_len
        context.add_highlight(Highlight(name_start, name_start + length), IndexType.NAME)
    elif start + length > parent_len:
        context.add_highlight(Highlight(start, None), IndexType.PATH)
        context.add_highlight(Highlight(0, start + length - parent_len), IndexType.NAME)
    else:
        context.add_highlight(Highlight(start, start + length), IndexType.PATH)


class RegexNode(Node):
    """Matches a compiled regular expression against the name or the path."""

    def __init__(self, regex: re.Pattern, flags: QueryFlag = QueryFlag.NONE) -> None:
        super().__init__(flags)
        self.regex = regex
        self.search_in_path = QueryFlag.SEARCH_IN_PATH in flags

    def _haystack(self, context: MatchContext) -> Optional[str]:
        return context.path if self.search_in_path else context.name

    def search(self, context: MatchContext) -> bool:
        haystack = self._haystack(context)
        if haystack is None:
            return False
        return self.regex.search(haystack) is not None

    def highlight(self, context: MatchContext) -> bool:
        haystack = self._haystack(context)
        if haystack is None:
            return False
        match = self.regex.search(haystack)
        if match is None:
            return False
        for group in range(self.regex.groups + 1):
            start, end = match.span(group)
            if start < 0:
                continue
            if self.search_in_path:
                _add_path_highlight(context, start, end - start)
            else:
                context.add_highlight(Highlight(start, end), IndexType.NAME)
        return True

    def __repr__(self) -> str:
        return f"RegexNode({self.regex.pattern!r}, flags={self.flags!r})"


class TextNode(Node):
    """Matches plain text in the name or the path of an entry."""

    def __init__(self, search_term: str, flags: QueryFlag = QueryFlag.NONE) -> None:
        super().__init__(flags)
        self.search_term = search_term
        self.search_in_path = QueryFlag.SEARCH_IN_PATH in flags
        self.exact = QueryFlag.EXACT_MATCH in flags
        if QueryFlag.MATCH_CASE in flags:
            self._mode = "case"
        elif search_term.isascii():
            self._mode = "ascii"
        else:
            self._mode = "unicode"
        self._needle_folded = fold_needle(search_term)
        self._needle_ascii = _ascii_lower(search_term)

    def _haystack(self, context: MatchContext) -> Optional[str]:
        return context.path if self.search_in_path else context.name

    def _find(self, haystack: str) -> int:
        if self._mode == "case":
            return haystack.find(self.search_term)
        return _ascii_lower(haystack).find(self._needle_ascii)

    def _equal(self, haystack: str) -> bool:
        if self._mode == "case":
            return haystack == self.search_term
        return _ascii_lower(haystack) == self._needle_ascii

    def search(self, context: MatchContext) -> bool:
        if self._mode == "unicode":
            haystack = context.folded_path if self.search_in_path else context.folded_name
            if haystack is None:
                return False
            if self.exact:
                return haystack == self._needle_folded
            return self._needle_folded in haystack
        haystack = self._haystack(context)
        if haystack is None:
            return False
        if self.exact:
            return self._equal(haystack)
        return self._find(haystack) >= 0

    def highlight(self, context: MatchContext) -> bool:
        if self._mode == "unicode":
            return False
        haystack = self._haystack(context)
        if haystack is None:
            return False
        if self.exact:
            if not self._equal(haystack):
                return False
            if self.search_in_path:
                context.add_highlight(Highlight(), IndexType.PATH)
            context.add_highlight(Highlight(), IndexType.NAME)
            return True
        start = self._find(haystack)
        if start < 0:
            return False
        length = len(self.search_term)
        if self.search_in_path:
            _add_path_highlight(context, start, length)
        else:
            context.add_highlight(Highlight(start, start + length), IndexType.NAME)
        return True

    def __repr__(self) -> str:
        return f"TextNode({self.search_term!r}, flags={self.flags!r})"


def fold_needle(text: str) -> str:
    """Fold a search term the same way entry names are folded."""
    from filequery.match_context import fold

    return fold(text)


def wildcard_to_regex(pattern: str) -> str:
    """Turn a pattern with ``*`` and ``?`` into an anchored regular expression."""
    parts = ["^"]
    for char in pattern:
        if char in _WILDCARD_ESCAPED:
            parts.append("\\" + char)
        elif char == "*":
            parts.append(".*")
        elif char == "?":
            parts.append(".")
        else:
            parts.append(char)
    parts.append("$")
    return "".join(parts)


def create_regex_node(pattern: str, flags: QueryFlag) -> Optional[RegexNode]:
    """Compile ``pattern`` into a node; None if it is not a valid expression."""
    options = 0 if QueryFlag.MATCH_CASE in flags else re.IGNORECASE
    try:
        regex = re.compile(pattern, options)
    except re.error as error:
        _log.debug("[regex] compilation failed at offset %s: %s", error.pos, error.msg)
        return None
    return RegexNode(regex, flags)


def create_node(search_term: str, flags: QueryFlag) -> Optional[Node]:
    """Build the node for one search word, honouring the automatic flags."""
    has_separator = DIR_SEPARATOR in search_term
    if QueryFlag.SEARCH_IN_PATH in flags or (
        QueryFlag.AUTO_SEARCH_IN_PATH in flags and has_separator
    ):
        flags |= QueryFlag.SEARCH_IN_PATH
    if QueryFlag.AUTO_MATCH_CASE in flags and any(c.isupper() for c in search_term):
        flags |= QueryFlag.MATCH_CASE

    if QueryFlag.REGEX in flags:
        return create_regex_node(search_term, flags)
    if "*" in search_term or "?" in search_term:
        return create_regex_node(wildcard_to_regex(search_term), flags)
    return TextNode(search_term, flags)