"""Expression strategy: boolean logic over other features' states."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Dict, Literal

from pydantic import field_validator

from flipkit.core.flipping.context import FeatureEvaluationContext
from flipkit.core.flipping.expression import ExpressionNode, parse_expression
from flipkit.core.flipping.strategy.base import FlippingStrategy

logger = logging.getLogger(__name__)

# Compiled trees are immutable and shared per source text
_compile = lru_cache(maxsize=512)(parse_expression)


class ExpressionFlipStrategy(FlippingStrategy):
    """Enabled when ``expression`` holds over the referenced features.

    ``"basic-dashboard & (premium-user | beta-tester)"`` is on only while
    ``basic-dashboard`` is enabled and at least one of the other two is.

    Each reference reads the referenced feature's own ``enabled`` flag from
    the store; its flipping strategy is not evaluated. Features missing from
    the store, and references to the feature being evaluated, count as
    disabled. The expression is compiled when the strategy is built, so a
    malformed expression fails at construction.
    """

    type: Literal["expression"] = "expression"
    expression: str

    @field_validator("expression")
    @classmethod
    def _compiles(cls, value: str) -> str:
        _compile(value)
        return value

    @property
    def tree(self) -> ExpressionNode:
        return _compile(self.expression)

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        states = await self._feature_states(eval_context)
        return self.tree.evaluate(states)

    async def _feature_states(self, eval_context: FeatureEvaluationContext) -> Dict[str, bool]:
        states: Dict[str, bool] = {}
        for name in sorted(self.tree.feature_names()):
            if name == eval_context.feature_name:
                logger.debug("Expression for %s references itself", name)
                continue
            feature = await eval_context.store.get(name)
            if feature is not None:
                states[name] = feature.enabled
        return states


__all__ = ["ExpressionFlipStrategy"]
