"""Boolean expression language over feature states."""

from flipkit.core.flipping.expression.node import (
    ExpressionNode,
    ExpressionOperator,
    FeatureReference,
    Operation,
)
from flipkit.core.flipping.expression.parser import (
    MAX_NESTING,
    ExpressionParser,
    parse_expression,
    tokenize,
)

__all__ = [
    "MAX_NESTING",
    "ExpressionNode",
    "ExpressionOperator",
    "FeatureReference",
    "Operation",
    "ExpressionParser",
    "parse_expression",
    "tokenize",
]
