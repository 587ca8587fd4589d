"""Expression tree for boolean feature expressions.

Expression: ``(featureA | featureB) & !featureC``::

         Operation(AND)
          /         \\
    Operation(OR)  Operation(NOT)
      /     \\           |
    Ref(A) Ref(B)     Ref(C)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Mapping, Tuple


class ExpressionOperator(Enum):
    """Logical operators, listed from lowest to highest precedence."""

    OR = "|"
    AND = "&"
    NOT = "!"

    @property
    def symbol(self) -> str:
        return self.value


class ExpressionNode(ABC):
    """A node in an expression tree."""

    @abstractmethod
    def evaluate(self, states: Mapping[str, bool]) -> bool:
        """Evaluate the subtree against a snapshot of feature states."""

    @abstractmethod
    def feature_names(self) -> FrozenSet[str]:
        """All feature names referenced in the subtree."""


@dataclass(frozen=True)
class FeatureReference(ExpressionNode):
    """Leaf referencing another feature by name."""

    name: str

    def evaluate(self, states: Mapping[str, bool]) -> bool:
        # Unknown features count as disabled
        return bool(states.get(self.name, False))

    def feature_names(self) -> FrozenSet[str]:
        return frozenset((self.name,))

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Operation(ExpressionNode):
    """Logical operation over an ordered tuple of children."""

    operator: ExpressionOperator
    children: Tuple[ExpressionNode, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))
        if self.operator is ExpressionOperator.NOT and len(self.children) != 1:
            raise ValueError(
                f"NOT takes exactly one operand, got {len(self.children)}"
            )

    def evaluate(self, states: Mapping[str, bool]) -> bool:
        if self.operator is ExpressionOperator.NOT:
            return not self.children[0].evaluate(states)
        if self.operator is ExpressionOperator.AND:
            return all(child.evaluate(states) for child in self.children)
        return any(child.evaluate(states) for child in self.children)

    def feature_names(self) -> FrozenSet[str]:
        names: FrozenSet[str] = frozenset()
        for child in self.children:
            names = names | child.feature_names()
        return names

    def __str__(self) -> str:
        parts = [_render_operand(child) for child in self.children]
        if self.operator is ExpressionOperator.NOT:
            return f"!{parts[0]}"
        return f" {self.operator.symbol} ".join(parts)


def _render_operand(node: ExpressionNode) -> str:
    # NOT binds tighter than anything else, so it never needs grouping
    if isinstance(node, Operation) and node.operator is not ExpressionOperator.NOT:
        return f"({node})"
    return str(node)


__all__ = [
    "ExpressionOperator",
    "ExpressionNode",
    "FeatureReference",
    "Operation",
]
