"""Release date strategy: on from a given instant onwards."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from pydantic import field_validator

from flipkit.core.flipping.context import FeatureEvaluationContext, resolve_instant
from flipkit.core.flipping.strategy.base import FlippingStrategy


class ReleaseDateFlipStrategy(FlippingStrategy):
    """Enabled once ``now >= release_date``.

    "now" can be pinned with the ``overrideInstant`` custom parameter
    (ISO-8601, e.g. ``"2024-12-26T00:00:00Z"``).
    """

    type: Literal["release-date"] = "release-date"
    release_date: datetime

    @field_validator("release_date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        return resolve_instant(eval_context) >= self.release_date


__all__ = ["ReleaseDateFlipStrategy"]
