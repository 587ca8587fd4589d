"""Contextual strategy: combine sub-strategies with AND / OR."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Literal, Tuple

from flipkit.core.flipping.context import FeatureEvaluationContext
from flipkit.core.flipping.strategy.base import FlippingStrategy

if TYPE_CHECKING:
    from flipkit.core.flipping.strategy.registry import Strategy


class CombineWith(str, Enum):
    AND = "AND"
    OR = "OR"


class ContextualStrategy(FlippingStrategy):
    """Combine child strategies, evaluated in declared order.

    AND needs every child to pass (no children: True); OR needs one
    (no children: False). Children may themselves be contextual.

    Example: enabled for EU users who are VIPs or in a 5% rollout::

        ContextualStrategy(
            combine_with=CombineWith.AND,
            strategies=(
                RegionFlippingStrategy(granted_regions={"EU"}),
                ContextualStrategy(
                    combine_with=CombineWith.OR,
                    strategies=(
                        AllowListStrategy(allowed_users={"vip"}),
                        DarkLaunchStrategy(weight=0.05),
                    ),
                ),
            ),
        )
    """

    type: Literal["contextual"] = "contextual"
    combine_with: CombineWith
    strategies: Tuple[Strategy, ...] = ()

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        if self.combine_with is CombineWith.AND:
            for strategy in self.strategies:
                if not await strategy.evaluate(eval_context):
                    return False
            return True

        for strategy in self.strategies:
            if await strategy.evaluate(eval_context):
                return True
        return False


__all__ = ["CombineWith", "ContextualStrategy"]
