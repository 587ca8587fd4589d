"""Feature Flipper.

Provides high-level feature management:
- Flag checks against a store
- Auto-creation of unknown features
- Feature lifecycle (create, update, enable, disable, delete)
"""

from __future__ import annotations

import logging
import random
from datetime import datetime
from typing import Callable, List, Optional

from flipkit.core.config import get_settings
from flipkit.core.errors import FeatureNotFoundError
from flipkit.core.flipping.context import (
    FeatureEvaluationContext,
    FlippingExecutionContext,
    utc_now,
)
from flipkit.core.flipping.feature import Feature
from flipkit.core.flipping.store import FeatureStore, InMemoryFeatureStore
from flipkit.core.logging import clear_feature_context, set_feature_context

logger = logging.getLogger(__name__)


class FeatureFlipper:
    """Entry point for checking and managing features.

    ``auto_create`` defaults to the ``FLIPKIT_AUTO_CREATE`` setting. Pass
    ``random_source`` and ``clock`` to make percentage and time based
    strategies deterministic.
    """

    def __init__(
        self,
        store: Optional[FeatureStore] = None,
        auto_create: Optional[bool] = None,
        random_source: Optional[Callable[[], float]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store if store is not None else InMemoryFeatureStore()
        self.auto_create = get_settings().AUTO_CREATE if auto_create is None else auto_create
        self.random_source = random_source or random.random
        self.clock = clock or utc_now

    async def is_enabled(
        self,
        uid: str,
        context: Optional[FlippingExecutionContext] = None,
    ) -> bool:
        """Check whether ``uid`` is on for the given execution context."""
        feature = await self.store.get(uid)
        if feature is None:
            if self.auto_create:
                logger.warning("Feature '%s' not found, creating it disabled", uid)
                await self.store.update(Feature(uid=uid, enabled=False))
            else:
                logger.debug("Feature '%s' not found", uid)
            return False

        if not feature.enabled:
            return False
        if feature.flipping_strategy is None:
            return True

        ctx = context or FlippingExecutionContext.empty()
        set_feature_context(uid, ctx.user)
        try:
            result = await feature.flipping_strategy.evaluate(self._evaluation_context(uid, ctx))
        finally:
            clear_feature_context()
        logger.debug(
            "Evaluated %s with %s strategy: %s", uid, feature.flipping_strategy.type, result
        )
        return result

    def _evaluation_context(
        self, uid: str, context: FlippingExecutionContext
    ) -> FeatureEvaluationContext:
        return FeatureEvaluationContext(
            feature_name=uid,
            store=self.store,
            context=context,
            random_source=self.random_source,
            clock=self.clock,
        )

    async def feature(self, uid: str) -> Feature:
        """Get a feature, raising ``FeatureNotFoundError`` when missing."""
        feature = await self.store.get(uid)
        if feature is None:
            raise FeatureNotFoundError(uid)
        return feature

    async def exists(self, uid: str) -> bool:
        return await self.store.exists(uid)

    async def all_features(self) -> List[Feature]:
        return await self.store.get_all()

    async def create(self, feature: Feature) -> Feature:
        await self.store.create(feature)
        return feature

    async def update(self, feature: Feature) -> Feature:
        await self.store.update(feature)
        return feature

    async def delete(self, uid: str) -> None:
        await self.store.delete(uid)

    async def enable(self, uid: str) -> Feature:
        return await self.store.enable(uid)

    async def disable(self, uid: str) -> Feature:
        return await self.store.disable(uid)


__all__ = ["FeatureFlipper"]
