"""Feature definition."""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from flipkit.core.errors import InvalidFeatureError
from flipkit.core.flipping.strategy.registry import Strategy


class Feature(BaseModel):
    """A named boolean capability gate.

    ``enabled`` is the master switch; when a ``flipping_strategy`` is set it
    further narrows who sees the feature while it is enabled.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    uid: str
    enabled: bool = False
    description: Optional[str] = None
    group: Optional[str] = None
    permissions: FrozenSet[str] = frozenset()
    flipping_strategy: Optional[Strategy] = None

    @field_validator("uid")
    @classmethod
    def _uid_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise InvalidFeatureError("Feature uid cannot be blank")
        return value

    def enable(self) -> "Feature":
        return self.model_copy(update={"enabled": True})

    def disable(self) -> "Feature":
        return self.model_copy(update={"enabled": False})

    def has_permissions(self) -> bool:
        return bool(self.permissions)

    def has_group(self) -> bool:
        return bool(self.group and self.group.strip())

    def has_flipping_strategy(self) -> bool:
        return self.flipping_strategy is not None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Feature":
        return cls.model_validate(data)
