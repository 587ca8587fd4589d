"""Membership and constant strategies.

Provides:
- AlwaysOn / AlwaysOff
- Allow / deny lists over the context user
- Client (source) and server (host) filters
- Region and granted-authority filters over custom parameters
"""

from __future__ import annotations

from typing import FrozenSet, Literal, Optional

from flipkit.core.flipping.context import (
    AUTHORITIES_PARAM_KEY,
    REGION_PARAM_KEY,
    FeatureEvaluationContext,
)
from flipkit.core.flipping.strategy.base import FlippingStrategy


class AlwaysOnStrategy(FlippingStrategy):
    """Strategy that always returns True."""

    type: Literal["always_on"] = "always_on"

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        return True


class AlwaysOffStrategy(FlippingStrategy):
    """Strategy that always returns False."""

    type: Literal["always_off"] = "always_off"

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        return False


class AllowListStrategy(FlippingStrategy):
    """Enabled only for users in ``allowed_users``; no user means disabled."""

    type: Literal["allowlist"] = "allowlist"
    allowed_users: FrozenSet[str] = frozenset()

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        user = eval_context.context.user
        if user is None:
            return False
        return user in self.allowed_users


class DenyListStrategy(FlippingStrategy):
    """Disabled for users in ``denied_users``; no user means enabled."""

    type: Literal["denylist"] = "denylist"
    denied_users: FrozenSet[str] = frozenset()

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        user = eval_context.context.user
        if user is None:
            return True
        return user not in self.denied_users


class ClientFilterStrategy(FlippingStrategy):
    """Enabled when the context source is one of ``granted_clients``."""

    type: Literal["client-filter"] = "client-filter"
    granted_clients: FrozenSet[str] = frozenset()

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        return _member(eval_context.context.source, self.granted_clients)


class ServerFilterStrategy(FlippingStrategy):
    """Enabled when the context host is one of ``granted_servers``."""

    type: Literal["server-filter"] = "server-filter"
    granted_servers: FrozenSet[str] = frozenset()

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        return _member(eval_context.context.host, self.granted_servers)


class RegionFlippingStrategy(FlippingStrategy):
    """Enabled when the ``region`` custom parameter is granted."""

    type: Literal["region"] = "region"
    granted_regions: FrozenSet[str] = frozenset()

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        return _member(eval_context.context.get(REGION_PARAM_KEY), self.granted_regions)


class GrantedAuthorityStrategy(FlippingStrategy):
    """Enabled when the caller holds at least one required authority.

    Authorities are read from the ``authorities`` custom parameter as a
    comma-separated list, e.g. ``"ROLE_ADMIN, ROLE_USER"``. Matching is
    case-sensitive; only whitespace around separators is ignored. An empty
    ``required_authorities`` set places no restriction.
    """

    type: Literal["granted_authority"] = "granted_authority"
    required_authorities: FrozenSet[str] = frozenset()

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        if not self.required_authorities:
            return True

        raw = eval_context.context.get(AUTHORITIES_PARAM_KEY)
        if raw is None:
            return False
        return not self.required_authorities.isdisjoint(parse_authorities(raw))


def parse_authorities(raw: str) -> FrozenSet[str]:
    return frozenset(item.strip() for item in raw.split(",") if item.strip())


def _member(value: Optional[str], granted: FrozenSet[str]) -> bool:
    if value is None:
        return False
    return value in granted


__all__ = [
    "AlwaysOnStrategy",
    "AlwaysOffStrategy",
    "AllowListStrategy",
    "DenyListStrategy",
    "ClientFilterStrategy",
    "ServerFilterStrategy",
    "RegionFlippingStrategy",
    "GrantedAuthorityStrategy",
    "parse_authorities",
]
