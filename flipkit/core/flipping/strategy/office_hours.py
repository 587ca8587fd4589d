"""Office hour strategy.

Provides:
- DayOfWeek and HourInterval (``"HH:MM-HH:MM"``) calendar primitives
- OfficeHourStrategy reconciling a weekly schedule with public holidays
  and date-specific special openings in a given timezone

Resolution order for a civil date: public holiday (closed) > special
opening > weekly schedule > closed.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from enum import Enum
from types import MappingProxyType
from typing import Any, FrozenSet, Iterable, Literal, Mapping, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_serializer,
    field_validator,
    model_serializer,
    model_validator,
)

from flipkit.core.config import get_settings
from flipkit.core.errors import InvalidStrategyError
from flipkit.core.flipping.context import (
    OVERRIDE_DATETIME_KEY,
    OVERRIDE_TIMEZONE_KEY,
    FeatureEvaluationContext,
    load_zone,
    resolve_instant,
)
from flipkit.core.flipping.strategy.base import FlippingStrategy

_INTERVAL_RE = re.compile(r"^\s*(\d{2}):(\d{2})\s*-\s*(\d{2}):(\d{2})\s*$")


class DayOfWeek(str, Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def of(cls, day: date) -> "DayOfWeek":
        return _WEEK[day.weekday()]


_WEEK = list(DayOfWeek)
WEEKDAYS = tuple(_WEEK[:5])


def _parse_clock(hours: str, minutes: str, literal: str) -> time:
    hour, minute = int(hours), int(minutes)
    if hour > 23 or minute > 59:
        raise InvalidStrategyError(
            f"Invalid time '{hours}:{minutes}' in hour interval {literal!r}"
        )
    return time(hour, minute)


def _parse_bounds(literal: str) -> Tuple[time, time]:
    match = _INTERVAL_RE.match(literal)
    if match is None:
        raise InvalidStrategyError(
            f"Invalid hour interval {literal!r}, expected HH:MM-HH:MM"
        )
    start = _parse_clock(match.group(1), match.group(2), literal)
    end = _parse_clock(match.group(3), match.group(4), literal)
    if start >= end:
        raise InvalidStrategyError(
            f"Hour interval {literal!r} must start before it ends"
        )
    return start, end


class HourInterval(BaseModel):
    """Half-open time-of-day range ``[start, end)`` within a single day.

    Intervals crossing midnight are not supported; split them over two
    days instead (``"22:00-23:59"`` then ``"00:00-02:00"``).
    """

    model_config = ConfigDict(frozen=True)

    start: time
    end: time

    @classmethod
    def parse(cls, literal: str) -> "HourInterval":
        start, end = _parse_bounds(literal)
        return cls(start=start, end=end)

    @model_validator(mode="before")
    @classmethod
    def _from_literal(cls, data: Any) -> Any:
        if isinstance(data, str):
            start, end = _parse_bounds(data)
            return {"start": start, "end": end}
        return data

    @model_validator(mode="after")
    def _check_order(self) -> "HourInterval":
        if self.start >= self.end:
            raise InvalidStrategyError(
                f"Hour interval start {self.start} must be before end {self.end}"
            )
        return self

    @model_serializer
    def _to_literal(self) -> str:
        return str(self)

    def matches(self, moment: time) -> bool:
        moment = moment.replace(tzinfo=None)
        return self.start <= moment < self.end

    def __str__(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"


def _default_timezone() -> str:
    return get_settings().DEFAULT_TIMEZONE


class OfficeHourStrategy(FlippingStrategy):
    """Enabled while "now" falls inside the configured opening hours.

    Custom parameters used for deterministic evaluation:

    - ``overrideDateTime``: civil date-time (``2024-12-25T10:30:00``) used as is
    - ``overrideTimezone``: zone id replacing ``timezone``
    - ``overrideInstant``: absolute instant converted to the zone
    """

    type: Literal["office-hours"] = "office-hours"
    weekly_schedule: Mapping[DayOfWeek, Tuple[HourInterval, ...]] = Field(
        default_factory=dict, validate_default=True
    )
    public_holidays: FrozenSet[date] = frozenset()
    special_openings: Mapping[date, Tuple[HourInterval, ...]] = Field(
        default_factory=dict, validate_default=True
    )
    timezone: str = Field(default_factory=_default_timezone)

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        load_zone(value)
        return value

    @field_validator("weekly_schedule", "special_openings")
    @classmethod
    def _read_only(cls, value: Mapping[Any, Any]) -> Mapping[Any, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("weekly_schedule", "special_openings", mode="wrap")
    def _dump_mapping(
        self, value: Mapping[Any, Any], handler: SerializerFunctionWrapHandler
    ) -> Any:
        return handler(dict(value))

    @classmethod
    def weekdays(
        cls,
        *intervals: str,
        **kwargs: Any,
    ) -> "OfficeHourStrategy":
        """Same opening hours Monday through Friday."""
        parsed = tuple(HourInterval.parse(literal) for literal in intervals)
        schedule = {day: parsed for day in WEEKDAYS}
        return cls(weekly_schedule=schedule, **kwargs)

    async def evaluate(self, eval_context: FeatureEvaluationContext) -> bool:
        return self.is_open(self.civil_now(eval_context))

    def civil_now(self, eval_context: FeatureEvaluationContext) -> datetime:
        """Wall-clock date-time used for evaluation, without tzinfo."""
        params = eval_context.context
        zone = load_zone(params.get(OVERRIDE_TIMEZONE_KEY) or self.timezone)

        override = params.get(OVERRIDE_DATETIME_KEY)
        if override is not None:
            civil = datetime.fromisoformat(override)
            if civil.tzinfo is not None:
                civil = civil.astimezone(zone)
            return civil.replace(tzinfo=None)

        return resolve_instant(eval_context).astimezone(zone).replace(tzinfo=None)

    def is_open(self, civil: datetime) -> bool:
        day = civil.date()
        moment = civil.time()

        if day in self.public_holidays:
            return False

        special = self.special_openings.get(day)
        if special is not None:
            return _any_match(special, moment)

        regular = self.weekly_schedule.get(DayOfWeek.of(day))
        if regular is None:
            return False
        return _any_match(regular, moment)


def _any_match(intervals: Iterable[HourInterval], moment: time) -> bool:
    return any(interval.matches(moment) for interval in intervals)


__all__ = ["DayOfWeek", "WEEKDAYS", "HourInterval", "OfficeHourStrategy"]
