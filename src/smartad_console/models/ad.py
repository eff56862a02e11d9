"""
Advertisement Models
====================

This module defines the catalog record for a single advertisement.

Core Concepts:
    - Gender: Demographic gender reported by the sensor
    - TargetGender: Gender an advertisement is aimed at (may be BOTH)
    - AdRecord: Immutable catalog entry with its eligibility predicate

Eligibility:
    An AdRecord matches a target when the target's age lies inside the
    inclusive age range AND the record targets BOTH or the target's gender.

Example:
    from smartad_console.models.ad import AdRecord, TargetGender

    ad = AdRecord(
        id="4",
        title="Fitness Tracker Pro",
        age_range=(20, 40),
        target_gender=TargetGender.BOTH,
        duration_seconds=12,
    )
"""

from enum import Enum
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Gender(str, Enum):
    """
    Gender of a detected person.

    Attributes:
        MALE: Detected as male
        FEMALE: Detected as female
    """

    MALE = "male"
    FEMALE = "female"


class TargetGender(str, Enum):
    """
    Gender an advertisement is aimed at.

    Attributes:
        MALE: Only shown to male targets
        FEMALE: Only shown to female targets
        BOTH: Shown regardless of gender
    """

    MALE = "male"
    FEMALE = "female"
    BOTH = "both"


class AdRecord(BaseModel):
    """
    Immutable advertisement catalog entry.

    Records are loaded once at process start and never mutated.

    Attributes:
        id: Unique catalog identifier
        title: Headline shown on the ad card
        description: Body copy shown on the ad card
        age_range: Inclusive (min, max) target age
        target_gender: Gender the ad is aimed at
        category: Free-form category label (Beauty, Finance, ...)
        media_ref: Opaque handle to the ad's image or video asset
        duration_seconds: Display duration for one showing
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Unique catalog identifier")

    title: str = Field(..., description="Ad headline")

    description: str = Field(default="", description="Ad body copy")

    age_range: Tuple[int, int] = Field(
        ...,
        description="Inclusive (min, max) target age",
    )

    target_gender: TargetGender = Field(
        default=TargetGender.BOTH,
        description="Gender the ad is aimed at",
    )

    category: str = Field(default="General", description="Category label")

    media_ref: str = Field(default="", description="Opaque asset handle")

    duration_seconds: int = Field(
        ...,
        gt=0,
        description="Seconds the ad stays on screen per showing",
    )

    @field_validator("age_range", mode="before")
    @classmethod
    def _parse_age_range(cls, value):
        """Accept "25-45" strings as written in catalog files."""
        if isinstance(value, str):
            parts = value.split("-")
            if len(parts) != 2:
                raise ValueError(f"age_range must look like 'min-max', got {value!r}")
            return (int(parts[0]), int(parts[1]))
        return value

    @model_validator(mode="after")
    def _check_age_range(self) -> "AdRecord":
        low, high = self.age_range
        if low < 0:
            raise ValueError("age_range minimum must be non-negative")
        if low > high:
            raise ValueError(f"age_range minimum {low} exceeds maximum {high}")
        return self

    @property
    def min_age(self) -> int:
        return self.age_range[0]

    @property
    def max_age(self) -> int:
        return self.age_range[1]

    def matches(self, age: int, gender: Gender) -> bool:
        """Check whether this ad is eligible for the given demographic."""
        if not self.min_age <= age <= self.max_age:
            return False
        return self.target_gender == TargetGender.BOTH or self.target_gender.value == gender.value
