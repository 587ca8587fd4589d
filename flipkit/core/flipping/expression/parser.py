"""Parser for boolean feature expressions.

Grammar::

    expr   := term ('|' term)*
    term   := factor ('&' factor)*
    factor := '!' factor | '(' expr ')' | identifier

An identifier is any run of characters other than whitespace and ``!&|()``.
Whitespace between tokens is ignored.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from flipkit.core.errors import ExpressionSyntaxError
from flipkit.core.flipping.expression.node import (
    ExpressionNode,
    ExpressionOperator,
    FeatureReference,
    Operation,
)

IDENTIFIER = "identifier"
# Deepest chain of "!" and "(" the parser accepts
MAX_NESTING = 100
OPEN_PAREN = "("
CLOSE_PAREN = ")"

_RESERVED = frozenset(
    [OPEN_PAREN, CLOSE_PAREN] + [op.symbol for op in ExpressionOperator]
)


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    position: int


def tokenize(expression: str) -> List[Token]:
    """Split an expression into operator, parenthesis and identifier tokens."""
    tokens: List[Token] = []
    index = 0
    length = len(expression)
    while index < length:
        char = expression[index]
        if char.isspace():
            index += 1
            continue
        if char in _RESERVED:
            tokens.append(Token(char, char, index))
            index += 1
            continue
        start = index
        while (
            index < length
            and not expression[index].isspace()
            and expression[index] not in _RESERVED
        ):
            index += 1
        tokens.append(Token(IDENTIFIER, expression[start:index], start))
    return tokens


class _Cursor:
    """Recursive-descent state over a token list."""

    def __init__(self, expression: str, tokens: List[Token]):
        self.expression = expression
        self.tokens = tokens
        self.index = 0
        self.depth = 0

    def peek(self) -> Optional[Token]:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def advance(self) -> Token:
        token = self.tokens[self.index]
        self.index += 1
        return token

    def error(self, message: str, token: Optional[Token] = None) -> ExpressionSyntaxError:
        position = token.position if token is not None else len(self.expression)
        return ExpressionSyntaxError(message, self.expression, position)

    def parse_or(self) -> ExpressionNode:
        children = [self.parse_and()]
        while self._next_is(ExpressionOperator.OR.symbol):
            self.advance()
            children.append(self.parse_and())
        if len(children) == 1:
            return children[0]
        return Operation(ExpressionOperator.OR, tuple(children))

    def parse_and(self) -> ExpressionNode:
        children = [self.parse_factor()]
        while self._next_is(ExpressionOperator.AND.symbol):
            self.advance()
            children.append(self.parse_factor())
        if len(children) == 1:
            return children[0]
        return Operation(ExpressionOperator.AND, tuple(children))

    def parse_factor(self) -> ExpressionNode:
        token = self.peek()
        if token is None:
            raise self.error("Expected operand but reached end of expression")

        if token.kind == IDENTIFIER:
            self.advance()
            return FeatureReference(token.text)

        if token.kind not in (ExpressionOperator.NOT.symbol, OPEN_PAREN):
            raise self.error(f"Expected operand but found '{token.text}'", token)

        self.depth += 1
        if self.depth > MAX_NESTING:
            raise self.error(f"Expression nested deeper than {MAX_NESTING} levels", token)
        try:
            return self._parse_nested(token)
        finally:
            self.depth -= 1

    def _parse_nested(self, token: Token) -> ExpressionNode:
        self.advance()
        if token.kind == ExpressionOperator.NOT.symbol:
            return Operation(ExpressionOperator.NOT, (self.parse_factor(),))

        node = self.parse_or()
        closing = self.peek()
        if closing is None or closing.kind != CLOSE_PAREN:
            raise self.error("Unbalanced parenthesis", token)
        self.advance()
        return node

    def _next_is(self, kind: str) -> bool:
        token = self.peek()
        return token is not None and token.kind == kind


class ExpressionParser:
    """Compiles expression strings into :class:`ExpressionNode` trees."""

    def parse(self, expression: str) -> ExpressionNode:
        tokens = tokenize(expression)
        if not tokens:
            raise ExpressionSyntaxError("Expression is empty", expression, 0)

        cursor = _Cursor(expression, tokens)
        node = cursor.parse_or()

        leftover = cursor.peek()
        if leftover is not None:
            raise cursor.error(f"Unexpected '{leftover.text}'", leftover)
        return node


_parser = ExpressionParser()


def parse_expression(expression: str) -> ExpressionNode:
    """Parse ``expression`` with a shared (stateless) parser."""
    return _parser.parse(expression)


__all__ = ["MAX_NESTING", "Token", "tokenize", "ExpressionParser", "parse_expression"]
