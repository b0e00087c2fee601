"""Query tokens, query flags and a stream of tokens to parse from."""

from __future__ import annotations

import enum
from typing import Iterable, Optional, Tuple, Union


class Token(enum.IntEnum):
    """Kinds of token a query is made of."""

    NONE = 0
    EOS = 1
    WORD = 2
    FIELD = 3
    AND = 4
    OR = 5
    NOT = 6
    CONTAINS = 7
    GREATER_EQ = 8
    GREATER = 9
    SMALLER_EQ = 10
    SMALLER = 11
    EQUAL = 12
    BRACKET_OPEN = 13
    BRACKET_CLOSE = 14


class QueryFlag(enum.Flag):
    """Options that change how a query term matches."""

    NONE = 0
    MATCH_CASE = enum.auto()
    AUTO_MATCH_CASE = enum.auto()
    REGEX = enum.auto()
    SEARCH_IN_PATH = enum.auto()
    AUTO_SEARCH_IN_PATH = enum.auto()
    EXACT_MATCH = enum.auto()
    FOLDERS_ONLY = enum.auto()
    FILES_ONLY = enum.auto()


TokenItem = Tuple[Token, Optional[str]]


def _normalize(item: Union[Token, TokenItem]) -> TokenItem:
    if isinstance(item, Token):
        return item, None
    if isinstance(item, tuple) and len(item) == 2 and isinstance(item[0], Token):
        return item[0], item[1]
    raise TypeError(f"not a token: {item!r}")


class TokenStream:
    """A sequence of ``(Token, value)`` pairs that ends in ``Token.EOS``.

    Items may be given as bare tokens (value ``None``) or as pairs.
    """

    def __init__(self, tokens: Iterable[Union[Token, TokenItem]]) -> None:
        self._tokens = [_normalize(item) for item in tokens]
        self._position = 0

    def peek(self) -> TokenItem:
        """Return the next token without consuming it."""
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return Token.EOS, None

    def next(self) -> TokenItem:
        """Consume and return the next token."""
        item = self.peek()
        if self._position < len(self._tokens):
            self._position += 1
        return item