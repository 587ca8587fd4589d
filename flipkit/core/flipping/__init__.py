"""Feature Flipping Module.

Provides feature flag evaluation:
- Composable flipping strategies
- Boolean expressions over other features
- Deterministic percentage rollout
- Office-hour and release-date scheduling
"""

from flipkit.core.flipping.context import (
    AUTHORITIES_PARAM_KEY,
    OVERRIDE_DATETIME_KEY,
    OVERRIDE_INSTANT_KEY,
    OVERRIDE_TIMEZONE_KEY,
    REGION_PARAM_KEY,
    FeatureEvaluationContext,
    FlippingExecutionContext,
)
from flipkit.core.flipping.strategy import (
    STRATEGY_TYPES,
    WEEKDAYS,
    AllowListStrategy,
    AlwaysOffStrategy,
    AlwaysOnStrategy,
    ClientFilterStrategy,
    CombineWith,
    ContextualStrategy,
    DarkLaunchStrategy,
    DayOfWeek,
    DenyListStrategy,
    ExpressionFlipStrategy,
    FlippingStrategy,
    GrantedAuthorityStrategy,
    HourInterval,
    OfficeHourStrategy,
    PonderationStrategy,
    RegionFlippingStrategy,
    ReleaseDateFlipStrategy,
    ServerFilterStrategy,
    Strategy,
    Weight,
    dump_strategy,
    parse_strategy,
)
from flipkit.core.flipping.feature import Feature
from flipkit.core.flipping.store import FeatureStore, InMemoryFeatureStore
from flipkit.core.flipping.client import FeatureFlipper

__all__ = [
    # Context
    "FlippingExecutionContext",
    "FeatureEvaluationContext",
    "OVERRIDE_INSTANT_KEY",
    "OVERRIDE_DATETIME_KEY",
    "OVERRIDE_TIMEZONE_KEY",
    "REGION_PARAM_KEY",
    "AUTHORITIES_PARAM_KEY",
    # Strategies
    "FlippingStrategy",
    "Strategy",
    "STRATEGY_TYPES",
    "parse_strategy",
    "dump_strategy",
    "AlwaysOnStrategy",
    "AlwaysOffStrategy",
    "AllowListStrategy",
    "DenyListStrategy",
    "ClientFilterStrategy",
    "ServerFilterStrategy",
    "RegionFlippingStrategy",
    "GrantedAuthorityStrategy",
    "PonderationStrategy",
    "DarkLaunchStrategy",
    "Weight",
    "ReleaseDateFlipStrategy",
    "DayOfWeek",
    "WEEKDAYS",
    "HourInterval",
    "OfficeHourStrategy",
    "ExpressionFlipStrategy",
    "CombineWith",
    "ContextualStrategy",
    # Features
    "Feature",
    "FeatureStore",
    "InMemoryFeatureStore",
    "FeatureFlipper",
]
