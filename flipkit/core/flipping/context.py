"""Evaluation contexts handed to flipping strategies.

Provides:
- FlippingExecutionContext: caller-supplied user / source / host / params
- FeatureEvaluationContext: what a strategy receives when it is evaluated
- Reserved custom parameter keys and "now" resolution helpers
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from random import random as _default_random
from types import MappingProxyType
from typing import TYPE_CHECKING, Callable, Dict, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flipkit.core.errors import InvalidStrategyError

if TYPE_CHECKING:
    from flipkit.core.flipping.store import FeatureStore

# Reserved custom parameters
OVERRIDE_INSTANT_KEY = "overrideInstant"
OVERRIDE_DATETIME_KEY = "overrideDateTime"
OVERRIDE_TIMEZONE_KEY = "overrideTimezone"
REGION_PARAM_KEY = "region"
AUTHORITIES_PARAM_KEY = "authorities"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class FlippingExecutionContext:
    """Identity and environment data supplied by the caller."""

    user: Optional[str] = None
    source: Optional[str] = None
    host: Optional[str] = None
    custom_params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "custom_params", MappingProxyType(dict(self.custom_params))
        )

    @classmethod
    def empty(cls) -> "FlippingExecutionContext":
        return cls()

    def with_user(self, user: str) -> "FlippingExecutionContext":
        return replace(self, user=user)

    def with_source(self, source: str) -> "FlippingExecutionContext":
        return replace(self, source=source)

    def with_host(self, host: str) -> "FlippingExecutionContext":
        return replace(self, host=host)

    def with_param(self, key: str, value: str) -> "FlippingExecutionContext":
        return self.with_params({key: value})

    def with_params(self, params: Mapping[str, str]) -> "FlippingExecutionContext":
        """Return a copy whose params are merged with ``params`` (new keys win)."""
        merged: Dict[str, str] = {**self.custom_params, **params}
        return replace(self, custom_params=merged)

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.custom_params.get(key, default)

    def has_param(self, key: str) -> bool:
        return key in self.custom_params

    def to_dict(self) -> Dict[str, object]:
        return {
            "user": self.user,
            "source": self.source,
            "host": self.host,
            "custom_params": dict(self.custom_params),
        }


@dataclass(frozen=True)
class FeatureEvaluationContext:
    """Everything a strategy may consult while deciding a flag.

    ``store`` gives read access to other features (used by expression
    strategies). ``random_source`` and ``clock`` are injected so that
    percentage and time based strategies can be made deterministic.
    """

    feature_name: str
    store: "FeatureStore"
    context: FlippingExecutionContext = field(default_factory=FlippingExecutionContext)
    random_source: Callable[[], float] = field(default=_default_random)
    clock: Callable[[], datetime] = field(default=utc_now)


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO-8601 timestamp: {value!r}") from exc
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def resolve_instant(eval_context: FeatureEvaluationContext) -> datetime:
    """Current instant, honouring the ``overrideInstant`` parameter."""
    override = eval_context.context.get(OVERRIDE_INSTANT_KEY)
    if override is not None:
        return parse_instant(override)
    now = eval_context.clock()
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def load_zone(name: str) -> ZoneInfo:
    """Resolve an IANA zone id, raising ``InvalidStrategyError`` when unknown."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidStrategyError(f"Unknown timezone: {name!r}") from exc


__all__ = [
    "OVERRIDE_INSTANT_KEY",
    "OVERRIDE_DATETIME_KEY",
    "OVERRIDE_TIMEZONE_KEY",
    "REGION_PARAM_KEY",
    "AUTHORITIES_PARAM_KEY",
    "FlippingExecutionContext",
    "FeatureEvaluationContext",
    "utc_now",
    "parse_instant",
    "resolve_instant",
    "load_zone",
]
