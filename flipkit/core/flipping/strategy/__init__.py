"""Flipping strategies."""

from flipkit.core.flipping.strategy.base import FlippingStrategy
from flipkit.core.flipping.strategy.contextual import CombineWith, ContextualStrategy
from flipkit.core.flipping.strategy.expression import ExpressionFlipStrategy
from flipkit.core.flipping.strategy.filters import (
    AllowListStrategy,
    AlwaysOffStrategy,
    AlwaysOnStrategy,
    ClientFilterStrategy,
    DenyListStrategy,
    GrantedAuthorityStrategy,
    RegionFlippingStrategy,
    ServerFilterStrategy,
)
from flipkit.core.flipping.strategy.office_hours import (
    WEEKDAYS,
    DayOfWeek,
    HourInterval,
    OfficeHourStrategy,
)
from flipkit.core.flipping.strategy.ponderation import (
    DarkLaunchStrategy,
    PonderationStrategy,
    Weight,
)
from flipkit.core.flipping.strategy.release_date import ReleaseDateFlipStrategy
from flipkit.core.flipping.strategy.registry import (
    STRATEGY_TYPES,
    Strategy,
    dump_strategy,
    parse_strategy,
)

__all__ = [
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
]
