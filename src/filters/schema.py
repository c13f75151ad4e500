"""Filter property and filter descriptor models (Pydantic).

`FilterProperties` is the raw, user-supplied configuration. `FilterDescriptor` is the resolved
filter: exactly one of `IntervalFilter` or `RangeFilter`, discriminated by `kind`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, model_validator

from src.filters.range_spec import RangeValue, subtract_range

PROPERTY_DATETIME_AFTER = "datetimeAfter"
PROPERTY_DATETIME_BEFORE = "datetimeBefore"
PROPERTY_DURATION = "duration"
PROPERTY_OFFSET = "offset"

MACRO_MARKER = "${"


class FilterProperties(BaseModel):
    """The four raw SObject filter properties as entered by a user.

    A property is *deferred* when the host lists it in `macro_fields` or when its value still
    contains a `${...}` macro. Deferred properties are not validated until they are resolved.
    """

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    datetime_after: str | None = Field(default=None, alias=PROPERTY_DATETIME_AFTER)
    datetime_before: str | None = Field(default=None, alias=PROPERTY_DATETIME_BEFORE)
    duration: str | None = Field(default=None, alias=PROPERTY_DURATION)
    offset: str | None = Field(default=None, alias=PROPERTY_OFFSET)
    macro_fields: frozenset[str] = Field(default_factory=frozenset)

    def value_of(self, property_name: str) -> str | None:
        """Return the raw value of a property by its external name."""

        values = {
            PROPERTY_DATETIME_AFTER: self.datetime_after,
            PROPERTY_DATETIME_BEFORE: self.datetime_before,
            PROPERTY_DURATION: self.duration,
            PROPERTY_OFFSET: self.offset,
        }
        return values[property_name]

    def is_deferred(self, property_name: str) -> bool:
        """Whether the property is a macro placeholder that cannot be checked yet."""

        if property_name in self.macro_fields:
            return True
        value = self.value_of(property_name)
        return value is not None and MACRO_MARKER in value


class IntervalFilter(BaseModel):
    """An explicit `[start, end)` window; a missing bound leaves that side open."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["interval"] = "interval"
    start: AwareDatetime | None = None
    end: AwareDatetime | None = None

    @model_validator(mode="after")
    def validate_bounds(self) -> IntervalFilter:
        """Validate that at least one bound is present."""

        if self.start is None and self.end is None:
            raise ValueError("interval filter requires start or end")
        return self


class RangeFilter(BaseModel):
    """A window relative to the run start time.

    The window ends `offset` before `anchor_time` and starts `duration` before its end:
    `[anchor_time - offset - duration, anchor_time - offset)`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["range"] = "range"
    anchor_time: AwareDatetime
    duration: RangeValue = Field(default_factory=dict)
    offset: RangeValue = Field(default_factory=dict)

    def bounds(self) -> tuple[datetime, datetime]:
        """Return the half-open `(start, end)` window.

        Raises:
            RangeSpecError: If offset or duration reaches past the representable date range.
        """

        end = subtract_range(PROPERTY_OFFSET, self.anchor_time, self.offset)
        start = subtract_range(PROPERTY_DURATION, end, self.duration)
        return start, end


FilterDescriptor = Annotated[IntervalFilter | RangeFilter, Field(discriminator="kind")]
