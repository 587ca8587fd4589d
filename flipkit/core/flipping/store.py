"""Feature Store.

Provides feature storage:
- Abstract async store contract
- In-memory store
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from flipkit.core.errors import FeatureAlreadyExistsError, FeatureNotFoundError
from flipkit.core.flipping.feature import Feature

logger = logging.getLogger(__name__)


class FeatureStore(ABC):
    """Abstract base class for feature storage."""

    @abstractmethod
    async def get(self, uid: str) -> Optional[Feature]:
        """Get a feature by uid, or None."""

    @abstractmethod
    async def get_all(self) -> List[Feature]:
        """Get all features."""

    @abstractmethod
    async def exists(self, uid: str) -> bool:
        """Check if a feature exists."""

    @abstractmethod
    async def create(self, feature: Feature) -> None:
        """Add a new feature; fails if the uid is taken."""

    @abstractmethod
    async def update(self, feature: Feature) -> None:
        """Insert or replace a feature."""

    @abstractmethod
    async def delete(self, uid: str) -> None:
        """Remove a feature; fails if missing."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every feature."""

    async def enable(self, uid: str) -> Feature:
        """Switch a feature on and return the stored copy."""
        return await self._set_enabled(uid, True)

    async def disable(self, uid: str) -> Feature:
        """Switch a feature off and return the stored copy."""
        return await self._set_enabled(uid, False)

    async def list_uids(self) -> List[str]:
        features = await self.get_all()
        return [feature.uid for feature in features]

    async def _set_enabled(self, uid: str, enabled: bool) -> Feature:
        feature = await self.get(uid)
        if feature is None:
            raise FeatureNotFoundError(uid)
        updated = feature.model_copy(update={"enabled": enabled})
        await self.update(updated)
        return updated


class InMemoryFeatureStore(FeatureStore):
    """In-memory feature storage.

    Features are immutable, so readers always see a consistent snapshot of a
    feature; the lock serialises map mutations.
    """

    def __init__(self, features: Optional[Iterable[Feature]] = None):
        self._features: Dict[str, Feature] = {}
        self._lock: Optional[asyncio.Lock] = None
        for feature in features or ():
            self._features[feature.uid] = feature

    def _get_lock(self) -> asyncio.Lock:
        if self._lock is None:
            self._lock = asyncio.Lock()
        return self._lock

    async def get(self, uid: str) -> Optional[Feature]:
        async with self._get_lock():
            return self._features.get(uid)

    async def get_all(self) -> List[Feature]:
        async with self._get_lock():
            return list(self._features.values())

    async def exists(self, uid: str) -> bool:
        async with self._get_lock():
            return uid in self._features

    async def create(self, feature: Feature) -> None:
        async with self._get_lock():
            if feature.uid in self._features:
                raise FeatureAlreadyExistsError(feature.uid)
            self._features[feature.uid] = feature
        logger.info("Created feature: %s", feature.uid)

    async def update(self, feature: Feature) -> None:
        async with self._get_lock():
            self._features[feature.uid] = feature
        logger.info("Updated feature: %s (enabled=%s)", feature.uid, feature.enabled)

    async def delete(self, uid: str) -> None:
        async with self._get_lock():
            if uid not in self._features:
                raise FeatureNotFoundError(uid)
            del self._features[uid]
        logger.info("Deleted feature: %s", uid)

    async def clear(self) -> None:
        async with self._get_lock():
            count = len(self._features)
            self._features.clear()
        logger.info("Cleared %d features", count)

    async def _set_enabled(self, uid: str, enabled: bool) -> Feature:
        async with self._get_lock():
            feature = self._features.get(uid)
            if feature is None:
                raise FeatureNotFoundError(uid)
            updated = feature.model_copy(update={"enabled": enabled})
            self._features[uid] = updated
        logger.info("Feature '%s' enabled: %s -> %s", uid, feature.enabled, enabled)
        return updated

    def __len__(self) -> int:
        return len(self._features)


__all__ = ["FeatureStore", "InMemoryFeatureStore"]
