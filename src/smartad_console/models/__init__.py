"""
Data Models
===========

Data models for the SmartAd console.

This module re-exports all data models for convenient access.

Models:
    Catalog:
        - Gender, TargetGender: Demographic enums
        - AdRecord: Immutable catalog entry

    Detection:
        - Target: Demographic profile driving selection
        - DetectedPerson, Position: Sensor output
        - DetectionLogEntry: Analytics log row

    State:
        - PlaybackState: Scheduler states (IDLE, PLAYING, PAUSED)
        - RotationSnapshot: Read-only scheduler view

    Events:
        - TargetArrived, TargetCleared, Tick, TogglePlay

    Output:
        - AgeBuckets, AnalyticsSummary: Dashboard statistics
        - SensorStatus, SessionStatus: System status
        - ConsoleOutput: Complete snapshot
"""

from smartad_console.models.ad import AdRecord, Gender, TargetGender
from smartad_console.models.detection import (
    DetectedPerson,
    DetectionLogEntry,
    Position,
    Target,
)
from smartad_console.models.events import TargetArrived, TargetCleared, Tick, TogglePlay
from smartad_console.models.state import PlaybackState, RotationSnapshot, TargetView
from smartad_console.models.output import (
    ActivityEntry,
    AgeBuckets,
    AnalyticsSummary,
    ConsoleOutput,
    OverlayView,
    SensorStatus,
    SessionStatus,
)

__all__ = [
    # Catalog
    "Gender",
    "TargetGender",
    "AdRecord",
    # Detection
    "Target",
    "Position",
    "DetectedPerson",
    "DetectionLogEntry",
    # Events
    "TargetArrived",
    "TargetCleared",
    "Tick",
    "TogglePlay",
    # State
    "PlaybackState",
    "RotationSnapshot",
    "TargetView",
    # Output
    "ActivityEntry",
    "AgeBuckets",
    "AnalyticsSummary",
    "OverlayView",
    "SensorStatus",
    "SessionStatus",
    "ConsoleOutput",
]
