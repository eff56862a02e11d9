"""
Console Output Models
=====================

This module defines the read-only output contract of the SmartAd console.

The output is structured into three tiers:
    1. Rotation: What is on screen now (current ad, countdown, state)
    2. Analytics: Rolling statistics over the detection log
    3. Session: System status (active flag, sensor, uptime)

Output Contract:
    {
        "timestamp": 1770500938.284,
        "rotation": {
            "state": "PLAYING",
            "eligible_ids": ["1", "4"],
            "current_index": 0,
            "seconds_remaining": 12,
            ...
        },
        "analytics": {
            "total_detections": 42,
            "recent_detections": 3,
            "gender_distribution": {"male": 20, "female": 22},
            "age_buckets": {"young": 10, "adult": 25, "senior": 7},
            "average_age": 34.6,
            ...
        },
        "session": {
            "is_active": true,
            "sensor": {"available": true, "frame_rate": 24.3, ...},
            "uptime_seconds": 3720,
            "uptime_display": "1h 2m"
        }
    }

Design Rules:
    - Snapshots are copies; mutating them never touches engine state
    - Analytics are observability only and never influence targeting
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from smartad_console.models.ad import Gender
from smartad_console.models.detection import DetectedPerson
from smartad_console.models.state import RotationSnapshot


class AgeBuckets(BaseModel):
    """
    Detection counts per age bucket.

    Attributes:
        young: Ages below 25
        adult: Ages 25 to 44
        senior: Ages 45 and above
    """

    young: int = Field(default=0, ge=0, description="Ages < 25")
    adult: int = Field(default=0, ge=0, description="Ages 25-44")
    senior: int = Field(default=0, ge=0, description="Ages >= 45")

    @property
    def total(self) -> int:
        return self.young + self.adult + self.senior


class ActivityEntry(BaseModel):
    """One row of the recent activity feed."""

    timestamp: float
    age: int
    gender: Gender
    ad_shown_id: Optional[str] = None


class AnalyticsSummary(BaseModel):
    """
    Dashboard statistics derived from the detection log.

    Attributes:
        total_detections: Entries currently in the log
        recent_detections: Entries inside the recent window
        recent_window_ms: Width of the recent window
        gender_distribution: Count per gender
        gender_share: Percentage per gender (0-100)
        age_buckets: Count per age bucket
        average_age: Mean age, 0 when the log is empty
        impressions: Ad-shown count per catalog id
        recent_activity: Latest entries, newest first
    """

    total_detections: int = Field(default=0, ge=0)
    recent_detections: int = Field(default=0, ge=0)
    recent_window_ms: int = Field(default=60_000, gt=0)
    gender_distribution: Dict[str, int] = Field(default_factory=dict)
    gender_share: Dict[str, float] = Field(default_factory=dict)
    age_buckets: AgeBuckets = Field(default_factory=AgeBuckets)
    average_age: float = Field(default=0.0, ge=0.0)
    impressions: Dict[str, int] = Field(default_factory=dict)
    recent_activity: List[ActivityEntry] = Field(default_factory=list)


class OverlayView(BaseModel):
    """Live detection overlay, cleared after the dwell window."""

    id: str
    age: int
    gender: Gender
    confidence: float = Field(..., ge=0.0, le=1.0)
    x: float = Field(..., ge=0.0, le=1.0)
    y: float = Field(..., ge=0.0, le=1.0)

    @classmethod
    def from_detection(cls, person: DetectedPerson) -> "OverlayView":
        return cls(
            id=person.id,
            age=person.age,
            gender=person.gender,
            confidence=person.confidence,
            x=person.position.x,
            y=person.position.y,
        )


class SensorStatus(BaseModel):
    """
    Sensor-side status for the presentation layer.

    Attributes:
        active: Whether the sampler is currently emitting
        available: False once the sensor reported permanent inactivity
        frame_rate: Simulated frames per second of the feed
        overlay: Live detection overlay, if any
        detections_emitted: Detections emitted since start
    """

    active: bool = False
    available: bool = True
    frame_rate: float = Field(default=0.0, ge=0.0)
    overlay: Optional[OverlayView] = None
    detections_emitted: int = Field(default=0, ge=0)


class SessionStatus(BaseModel):
    """Process-wide console status."""

    is_active: bool = False
    sensor: SensorStatus = Field(default_factory=SensorStatus)
    uptime_seconds: int = Field(default=0, ge=0)
    uptime_display: str = "0h 0m"
    failed_timers: List[str] = Field(
        default_factory=list,
        description="Timers ended by an invariant violation",
    )


class ConsoleOutput(BaseModel):
    """
    Complete console snapshot.

    Attributes:
        timestamp: UNIX timestamp when the snapshot was taken
        rotation: Rotation scheduler snapshot
        analytics: Dashboard statistics
        session: System status
    """

    timestamp: float = Field(..., description="Snapshot time (UNIX seconds)")
    rotation: RotationSnapshot
    analytics: AnalyticsSummary
    session: SessionStatus
