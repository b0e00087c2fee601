"""Turning a stream of query tokens into a tree of query nodes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional, Union

from filequery.fields import parse_field
from filequery.node import MatchEverythingNode, Node, Operator, OperatorNode, create_node
from filequery.tokens import QueryFlag, Token, TokenItem, TokenStream

_log = logging.getLogger(__name__)

_PRECEDENCE = {
    Token.NOT: 3,
    Token.AND: 2,
    Token.OR: 1,
}

_OPERATORS = {
    Token.AND: Operator.AND,
    Token.OR: Operator.OR,
    Token.NOT: Operator.NOT,
}

_IMPLICIT_AND_AFTER = {Token.WORD, Token.FIELD, Token.BRACKET_CLOSE}
_IMPLICIT_AND_BEFORE = {Token.WORD, Token.FIELD, Token.NOT, Token.BRACKET_OPEN}


@dataclass
class TreeNode:
    """A node of a query tree.

    ``node`` is None for a term that could not be built, such as a regular
    expression that does not compile; such a term matches nothing. Operator
    nodes have their operands as ``children``: two for AND and OR, one for NOT.
    """

    node: Optional[Node]
    children: list["TreeNode"] = field(default_factory=list)

    @property
    def is_operator(self) -> bool:
        return isinstance(self.node, OperatorNode)

    def walk(self) -> Iterator["TreeNode"]:
        """Yield this node and every node below it, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()


def _precedence(token: Token) -> int:
    return _PRECEDENCE.get(token, 0)


def _append_operator(postfix: list[Optional[Node]], token: Token) -> None:
    operator = _OPERATORS.get(token)
    if operator is not None:
        postfix.append(OperatorNode(operator))


def _handle_operator(postfix: list[Optional[Node]], stack: list[Token], token: Token) -> None:
    while stack and _precedence(token) <= _precedence(stack[-1]):
        _append_operator(postfix, stack.pop())
    stack.append(token)


def _odd_number_of_nots(stream: TokenStream) -> bool:
    # The current token is a NOT; swallow the ones that follow it.
    odd = True
    while stream.peek()[0] is Token.NOT:
        stream.next()
        odd = not odd
    return odd


def to_postfix(stream: TokenStream, flags: QueryFlag) -> list[Optional[Node]]:
    """Convert the infix query in ``stream`` to postfix order.

    Adjacent terms are joined by an implicit AND, pairs of consecutive NOTs
    cancel out and closing brackets without an open one are ignored.
    """
    stack: list[Token] = []
    postfix: list[Optional[Node]] = []
    open_brackets = 0
    close_brackets = 0

    while True:
        token, value = stream.next()
        if token is Token.EOS:
            break
        if token is Token.NOT:
            if _odd_number_of_nots(stream):
                _handle_operator(postfix, stack, token)
        elif token in (Token.AND, Token.OR):
            _handle_operator(postfix, stack, token)
        elif token is Token.BRACKET_OPEN:
            open_brackets += 1
            stack.append(token)
        elif token is Token.BRACKET_CLOSE:
            if open_brackets > close_brackets:
                while stack and stack[-1] is not Token.BRACKET_OPEN:
                    _append_operator(postfix, stack.pop())
                if stack:
                    stack.pop()
                close_brackets += 1
        elif token is Token.WORD:
            postfix.append(create_node(value or "", flags))
        elif token is Token.FIELD:
            postfix.append(parse_field(stream, value or "", flags))
        else:
            _log.debug("[infix-postfix] ignoring unexpected token: %s", token.name)

        next_token = stream.peek()[0]
        if token in _IMPLICIT_AND_AFTER and next_token in _IMPLICIT_AND_BEFORE:
            _handle_operator(postfix, stack, Token.AND)

    while stack:
        _append_operator(postfix, stack.pop())
    return postfix


def _empty(flags: QueryFlag) -> TreeNode:
    return TreeNode(MatchEverythingNode(flags))


def tree_from_postfix(postfix: Iterable[Optional[Node]], flags: QueryFlag) -> TreeNode:
    """Build a tree from nodes in postfix order.

    Missing operands are filled with terms that match everything; an empty
    query becomes a single such term.
    """
    stack: list[TreeNode] = []
    for node in postfix:
        if isinstance(node, OperatorNode):
            op_tree = TreeNode(OperatorNode(node.operator))
            right = stack.pop() if stack else None
            if node.operator is not Operator.NOT:
                left = stack.pop() if stack else None
                op_tree.children.append(left if left is not None else _empty(flags))
            op_tree.children.append(right if right is not None else _empty(flags))
            stack.append(op_tree)
        else:
            stack.append(TreeNode(node))
    if not stack:
        return _empty(flags)
    root = stack.pop()
    if stack:
        _log.debug("[build_tree] query stack still has nodes left")
    return root


def build_tree(
    tokens: Union[TokenStream, Iterable[Union[Token, TokenItem]]],
    flags: QueryFlag,
) -> TreeNode:
    """Parse a query given as tokens into a tree."""
    stream = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)
    return tree_from_postfix(to_postfix(stream, flags), flags)


def regex_tree(search_term: str, flags: QueryFlag) -> TreeNode:
    """A tree of a single term that hands the whole search term to the regex engine."""
    return TreeNode(create_node(search_term, flags | QueryFlag.REGEX))