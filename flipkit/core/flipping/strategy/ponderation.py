"""Percentage based rollout strategies.

A user identifier is bucketed with :func:`uniform_hash`, so the same user
always gets the same answer for a given weight. Without a user the draw
falls back to the evaluation context's random source.
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, field_validator

from flipkit.core.errors import InvalidStrategyError
from flipkit.core.flipping.context import FeatureEvaluationContext
from flipkit.core.flipping.strategy.base import FlippingStrategy
from flipkit.utils.uniform_hash import uniform_hash

logger = logging.getLogger(__name__)


class Weight:
    """Common rollout weights."""

    ZERO = 0.0
    ONE_PERCENT = 0.01
    TEN_PERCENT = 0.10
    TWENTY_FIVE_PERCENT = 0.25
    FIFTY_PERCENT = 0.50
    SEVENTY_FIVE_PERCENT = 0.75
    FULL = 1.0


class _WeightedStrategy(FlippingStrategy):
    # Strict: booleans and numeric strings are not weights
    weight: float = Field(default=Weight.FIFTY_PERCENT, strict=True)

    @field_validator("weight")
    @classmethod
    def _weight_in_range(cls, value: float) -> float:
        if not 0.0 <= value <= 1.0:
            raise InvalidStrategyError(
                f"Weight is a ratio and must be between 0.0 and 1.0, got: {value}"
            )
        return value

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        user = eval_context.context.user
        if user is not None:
            return uniform_hash(user) < self.weight

        logger.debug(
            "No user for %s, falling back to random draw", eval_context.feature_name
        )
        return eval_context.random_source() < self.weight


class PonderationStrategy(_WeightedStrategy):
    """Enable for roughly ``weight`` of users (A/B tests, gradual rollouts)."""

    type: Literal["ponderation"] = "ponderation"


class DarkLaunchStrategy(_WeightedStrategy):
    """Same bucketing as :class:`PonderationStrategy`, labelled as a dark launch."""

    type: Literal["dark-launch"] = "dark-launch"


__all__ = ["Weight", "PonderationStrategy", "DarkLaunchStrategy"]
