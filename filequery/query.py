"""A complete search query: the parsed term tree plus an optional filter."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Union

from filequery.match_context import DIR_SEPARATOR, EntryType, MatchContext
from filequery.node import Operator
from filequery.tokens import QueryFlag, Token, TokenItem, TokenStream
from filequery.tree import TreeNode, build_tree, regex_tree

Tokens = Union[TokenStream, Iterable[Union[Token, TokenItem]]]


class FilterType(enum.Enum):
    """Which kind of entries a filter lets through."""

    NONE = 0
    FOLDERS = 1
    FILES = 2


@dataclass(frozen=True)
class Filter:
    """A named restriction applied on top of the search term."""

    type: FilterType = FilterType.NONE
    query: Optional[str] = None
    flags: QueryFlag = QueryFlag.NONE
    name: str = ""


def _make_tree(search_term: str, tokens: Optional[Tokens], flags: QueryFlag) -> TreeNode:
    if QueryFlag.REGEX in flags:
        # the whole search term goes to the regex engine as a single term
        return regex_tree(search_term, flags)
    return build_tree(tokens if tokens is not None else [], flags)


def evaluate(
    tree: Optional[TreeNode],
    context: MatchContext,
    entry_type: EntryType,
    highlight: bool = False,
) -> bool:
    """Evaluate a query tree for the entry of ``context``.

    With ``highlight`` set, terms record their matching spans in ``context``.
    A missing tree matches everything; a term that could not be built
    matches nothing.
    """
    if tree is None:
        return True
    node = tree.node
    if node is None:
        return False
    if tree.is_operator:
        left = tree.children[0] if tree.children else None
        right = tree.children[1] if len(tree.children) > 1 else None
        if node.operator is Operator.AND:
            return evaluate(left, context, entry_type, highlight) and evaluate(
                right, context, entry_type, highlight
            )
        if node.operator is Operator.OR:
            return evaluate(left, context, entry_type, highlight) or evaluate(
                right, context, entry_type, highlight
            )
        return not evaluate(left, context, entry_type, highlight)
    if QueryFlag.FOLDERS_ONLY in node.flags and entry_type is not EntryType.FOLDER:
        return False
    if QueryFlag.FILES_ONLY in node.flags and entry_type is not EntryType.FILE:
        return False
    return node.highlight(context) if highlight else node.search(context)


class Query:
    """A search term parsed into a tree, with an optional filter."""

    def __init__(
        self,
        search_term: Optional[str] = None,
        tokens: Optional[Tokens] = None,
        flags: QueryFlag = QueryFlag.NONE,
        filter: Optional[Filter] = None,
        filter_tokens: Optional[Tokens] = None,
        sort_order: int = 0,
        query_id: Optional[str] = None,
        data: Any = None,
    ) -> None:
        self.search_term = search_term if search_term is not None else ""
        self.has_separator = DIR_SEPARATOR in self.search_term
        self.flags = flags
        self.filter = filter
        self.sort_order = sort_order
        self.query_id = query_id if query_id is not None else "[missing_id]"
        self.data = data
        self.tree = _make_tree(self.search_term, tokens, flags)
        self.filter_tree: Optional[TreeNode] = None
        if filter is not None and filter.query:
            self.filter_tree = _make_tree(filter.query, filter_tokens, filter.flags)

    def matches_everything(self) -> bool:
        """Whether every entry matches: an empty term and no restricting filter."""
        if self.search_term:
            return False
        return self.filter is None or self.filter.type is FilterType.NONE

    def _passes_filter(self, context: MatchContext, entry_type: EntryType) -> bool:
        flt = self.filter
        if flt is None:
            return True
        if flt.type is FilterType.NONE and flt.query is None:
            return True
        if flt.type is not FilterType.FILES and entry_type is EntryType.FILE:
            return False
        if flt.type is not FilterType.FOLDERS and entry_type is EntryType.FOLDER:
            return False
        if self.filter_tree is not None:
            return evaluate(self.filter_tree, context, entry_type)
        return True

    def _run(self, context: Optional[MatchContext], highlight: bool) -> bool:
        if context is None:
            return False
        entry = context.entry
        if entry is None:
            return False
        if not self._passes_filter(context, entry.type):
            return False
        return evaluate(self.tree, context, entry.type, highlight)

    def match(self, context: Optional[MatchContext]) -> bool:
        """Whether the entry of ``context`` matches the query."""
        return self._run(context, highlight=False)

    def highlight(self, context: Optional[MatchContext]) -> bool:
        """Match the entry and record the matching spans in ``context``."""
        return self._run(context, highlight=True)

    def __repr__(self) -> str:
        return f"Query({self.search_term!r}, flags={self.flags!r}, id={self.query_id!r})"