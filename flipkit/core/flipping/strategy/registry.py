"""Tagged union of all strategies and its wire codec.

A strategy travels as a record whose ``type`` field selects the variant::

    {"type": "contextual", "combineWith": "AND", "strategies": [
        {"type": "allowlist", "allowedUsers": ["alice"]},
        {"type": "ponderation", "weight": 0.25}
    ]}
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, Mapping, Type, Union

from pydantic import Field, TypeAdapter

from flipkit.core.flipping.strategy.base import FlippingStrategy
from flipkit.core.flipping.strategy.contextual import ContextualStrategy
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
from flipkit.core.flipping.strategy.office_hours import OfficeHourStrategy
from flipkit.core.flipping.strategy.ponderation import DarkLaunchStrategy, PonderationStrategy
from flipkit.core.flipping.strategy.release_date import ReleaseDateFlipStrategy

Strategy = Annotated[
    Union[
        AlwaysOnStrategy,
        AlwaysOffStrategy,
        AllowListStrategy,
        DenyListStrategy,
        ClientFilterStrategy,
        ServerFilterStrategy,
        RegionFlippingStrategy,
        GrantedAuthorityStrategy,
        PonderationStrategy,
        DarkLaunchStrategy,
        ReleaseDateFlipStrategy,
        OfficeHourStrategy,
        ExpressionFlipStrategy,
        ContextualStrategy,
    ],
    Field(discriminator="type"),
]

ContextualStrategy.model_rebuild()

STRATEGY_TYPES: Dict[str, Type[FlippingStrategy]] = {
    cls.model_fields["type"].default: cls
    for cls in (
        AlwaysOnStrategy,
        AlwaysOffStrategy,
        AllowListStrategy,
        DenyListStrategy,
        ClientFilterStrategy,
        ServerFilterStrategy,
        RegionFlippingStrategy,
        GrantedAuthorityStrategy,
        PonderationStrategy,
        DarkLaunchStrategy,
        ReleaseDateFlipStrategy,
        OfficeHourStrategy,
        ExpressionFlipStrategy,
        ContextualStrategy,
    )
}

_adapter: TypeAdapter = TypeAdapter(Strategy)


def parse_strategy(data: Union[str, bytes, Mapping[str, Any]]) -> FlippingStrategy:
    """Build a strategy from a tagged record (dict or JSON text).

    Raises ``pydantic.ValidationError`` for unknown types or invalid fields.
    """
    if isinstance(data, (str, bytes)):
        return _adapter.validate_json(data)
    return _adapter.validate_python(data)


def dump_strategy(strategy: FlippingStrategy) -> Dict[str, Any]:
    return strategy.to_dict()


__all__ = ["Strategy", "STRATEGY_TYPES", "parse_strategy", "dump_strategy"]
