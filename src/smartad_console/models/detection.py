"""
Detection Models
================

Data models for sensor output and targeting input.

These models are produced by the sensor layer and consumed by the
rotation scheduler and the analytics aggregator.
"""

from dataclasses import dataclass
from typing import Optional

from smartad_console.models.ad import Gender


@dataclass(frozen=True, slots=True)
class Target:
    """
    Demographic profile currently driving ad selection.

    Attributes:
        age: Age in years
        gender: Detected gender
    """

    age: int
    gender: Gender

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.age < 0:
            raise ValueError("age must be non-negative")
        if not isinstance(self.gender, Gender):
            object.__setattr__(self, "gender", Gender(self.gender))

    def __str__(self) -> str:
        return f"{self.age}y {self.gender.value}"


@dataclass(frozen=True, slots=True)
class Position:
    """Normalized overlay position, both axes in [0, 1]."""

    x: float
    y: float

    def __post_init__(self) -> None:
        if not (0.0 <= self.x <= 1.0 and 0.0 <= self.y <= 1.0):
            raise ValueError(f"position must be normalized, got ({self.x}, {self.y})")


@dataclass(frozen=True, slots=True)
class DetectedPerson:
    """
    Single detection emitted by the sensor.

    Attributes:
        id: Opaque identifier, unique per emission
        age: Estimated age in years
        gender: Estimated gender
        confidence: Detection confidence in [0, 1]
        position: Overlay position (not used for targeting)
    """

    id: str
    age: int
    gender: Gender
    confidence: float
    position: Position

    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.age < 0:
            raise ValueError("age must be non-negative")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError("confidence must be in [0, 1]")
        if not isinstance(self.gender, Gender):
            object.__setattr__(self, "gender", Gender(self.gender))

    @property
    def target(self) -> Target:
        """Targeting view of this detection."""
        return Target(age=self.age, gender=self.gender)


@dataclass(frozen=True, slots=True)
class DetectionLogEntry:
    """
    One row of the analytics detection log.

    Attributes:
        timestamp: UNIX timestamp of the detection
        age: Detected age
        gender: Detected gender
        ad_shown_id: Catalog id of the ad shown in response, if any
    """

    timestamp: float
    age: int
    gender: Gender
    ad_shown_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.age < 0:
            raise ValueError("age must be non-negative")
        if not isinstance(self.gender, Gender):
            object.__setattr__(self, "gender", Gender(self.gender))
