"""Parsing of field terms such as ``size:``, ``ext:`` and the flag modifiers."""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from filequery.node import (
    Comparison,
    ExtensionNode,
    MatchEverythingNode,
    Node,
    SizeNode,
    create_node,
)
from filequery.tokens import QueryFlag, Token, TokenStream

_log = logging.getLogger(__name__)

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_NUMBER = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")

_MULTIPLIERS = {
    "k": 1000,
    "m": 1000 * 1000,
    "g": 1000 * 1000 * 1000,
    "t": 1000 * 1000 * 1000 * 1000,
}

_COMPARISON_TOKENS = {
    Token.SMALLER: Comparison.SMALLER,
    Token.SMALLER_EQ: Comparison.SMALLER_EQ,
    Token.GREATER: Comparison.GREATER,
    Token.GREATER_EQ: Comparison.GREATER_EQ,
}


def parse_size_prefix(text: str) -> Optional[tuple[int, str]]:
    """Read a size such as ``10``, ``3k`` or ``2GB`` from the start of ``text``.

    Returns the size in bytes and the unparsed rest, or None when ``text``
    does not start with a number. A unit letter (k, m, g, t) multiplies by
    powers of 1000 and may be followed by ``b``.
    """
    match = _NUMBER.match(text)
    if match is None:
        return None
    size = max(_INT64_MIN, min(_INT64_MAX, int(match.group(1))))
    rest = text[match.end():]
    if not rest:
        return size, rest
    multiplier = _MULTIPLIERS.get(rest[0].lower())
    if multiplier is None:
        return size, rest
    size *= multiplier
    rest = rest[1:]
    if rest[:1] in ("b", "B"):
        rest = rest[1:]
    return size, rest


def _strip_range(text: str) -> Optional[str]:
    if text.startswith(".."):
        return text[2:]
    if text.startswith("-"):
        return text[1:]
    return None


def parse_size_with_range(text: str, flags: QueryFlag, comparison: Comparison) -> Node:
    """Parse ``SIZE``, ``SIZE..``, ``SIZE-``, ``SIZE..SIZE`` or ``SIZE-SIZE``."""
    parsed = parse_size_prefix(text)
    if parsed is None:
        _log.debug("[size:] invalid argument: %s", text)
        return MatchEverythingNode(flags)
    size_start, rest = parsed
    size_end = 0
    upper = _strip_range(rest)
    if upper is not None:
        if upper == "":
            # a range without an upper bound means "at least SIZE"
            comparison = Comparison.GREATER_EQ
        else:
            parsed_end = parse_size_prefix(upper)
            if parsed_end is not None:
                size_end = parsed_end[0]
                comparison = Comparison.RANGE
    return SizeNode(size_start, size_end, comparison, flags)


def parse_size(text: str, flags: QueryFlag, comparison: Comparison) -> Node:
    """Parse a single size compared with ``comparison``."""
    parsed = parse_size_prefix(text)
    if parsed is None:
        _log.debug("[size:] invalid argument: %s", text)
        return MatchEverythingNode(flags)
    size = parsed[0]
    return SizeNode(size, size, comparison, flags)


def _parse_field_size(stream: TokenStream, flags: QueryFlag) -> Optional[Node]:
    token, value = stream.next()
    result: Optional[Node] = None
    if token in _COMPARISON_TOKENS:
        next_token, next_value = stream.next()
        if next_token is Token.WORD:
            result = parse_size(next_value or "", flags, _COMPARISON_TOKENS[token])
    elif token is Token.WORD:
        result = parse_size_with_range(value or "", flags, Comparison.EQUAL)
    else:
        _log.debug("[size:] invalid or missing argument")
    return result if result is not None else MatchEverythingNode(flags)


def _parse_field_extension(stream: TokenStream, flags: QueryFlag) -> Optional[Node]:
    token, value = stream.next()
    if token is Token.WORD:
        extensions = value.split(";") if value else []
    else:
        # no argument: match entries without an extension
        extensions = [""]
    return ExtensionNode(extensions, flags)


def parse_modifier(stream: TokenStream, flags: QueryFlag) -> Optional[Node]:
    """Parse the term a modifier field applies ``flags`` to.

    Returns None when the term is a regular expression that does not compile.
    """
    token, value = stream.next()
    if token is Token.WORD:
        return create_node(value or "", flags)
    if token is Token.FIELD:
        return parse_field(stream, value or "", flags)
    return MatchEverythingNode(flags)


def _with(flag: QueryFlag) -> Callable[[TokenStream, QueryFlag], Optional[Node]]:
    def parse(stream: TokenStream, flags: QueryFlag) -> Optional[Node]:
        return parse_modifier(stream, flags | flag)

    return parse


def _without(flag: QueryFlag) -> Callable[[TokenStream, QueryFlag], Optional[Node]]:
    def parse(stream: TokenStream, flags: QueryFlag) -> Optional[Node]:
        return parse_modifier(stream, flags & ~flag)

    return parse


_FIELDS: dict[str, Callable[[TokenStream, QueryFlag], Optional[Node]]] = {
    "case": _with(QueryFlag.MATCH_CASE),
    "exact": _with(QueryFlag.EXACT_MATCH),
    "ext": _parse_field_extension,
    "file": _with(QueryFlag.FILES_ONLY),
    "files": _with(QueryFlag.FILES_ONLY),
    "folder": _with(QueryFlag.FOLDERS_ONLY),
    "folders": _with(QueryFlag.FOLDERS_ONLY),
    "nocase": _without(QueryFlag.MATCH_CASE),
    "nopath": _without(QueryFlag.SEARCH_IN_PATH),
    "noregex": _without(QueryFlag.REGEX),
    "path": _with(QueryFlag.SEARCH_IN_PATH),
    "regex": _with(QueryFlag.REGEX),
    "size": _parse_field_size,
}


def parse_field(stream: TokenStream, field_name: str, flags: QueryFlag) -> Optional[Node]:
    """Parse the argument of field ``field_name``; unknown fields match everything."""
    parser = _FIELDS.get(field_name)
    if parser is None:
        return MatchEverythingNode(flags)
    return parser(stream, flags)