"""Flipping strategy contract.

Every strategy is an immutable pydantic model carrying a ``type``
discriminator and exposing a single ``evaluate`` coroutine. Field names are
snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from flipkit.core.flipping.context import FeatureEvaluationContext


class FlippingStrategy(BaseModel, ABC):
    """Abstract base class for flipping strategies."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    @abstractmethod
    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        """Decide whether the feature is on for ``eval_context``."""

    def to_dict(self) -> Dict[str, Any]:
        """Tagged, JSON-compatible record for this strategy."""
        return self.model_dump(mode="json", by_alias=True)
