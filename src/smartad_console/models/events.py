"""
Scheduler Events
================

Named events accepted by RotationScheduler.handle_event().

Every state change of the scheduler is triggered by exactly one of these.
"""

from dataclasses import dataclass

from smartad_console.models.detection import Target


@dataclass(frozen=True, slots=True)
class TargetArrived:
    """A new target was reported by the sensor or set by the user."""

    target: Target


@dataclass(frozen=True, slots=True)
class TargetCleared:
    """The sensor reports no target, or the user cleared it."""


@dataclass(frozen=True, slots=True)
class Tick:
    """One second of playback elapsed."""


@dataclass(frozen=True, slots=True)
class TogglePlay:
    """User pressed play/pause."""
