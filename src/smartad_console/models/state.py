"""
Rotation State Models
=====================

This module defines the playback states and the read-only rotation snapshot.

Core Concepts:
    - PlaybackState: Discrete scheduler states (IDLE, PLAYING, PAUSED)
    - RotationSnapshot: Immutable view of the scheduler for presentation

Transitions:
    any     → PLAYING: target arrives (eligible set or fallback ad selected)
    any     → IDLE:    target cleared
    PLAYING → PAUSED:  user toggle (countdown frozen)
    PAUSED  → PLAYING: user toggle (countdown resumes from frozen value)

Example:
    snapshot = scheduler.snapshot()
    if snapshot.state == PlaybackState.PLAYING:
        print(snapshot.current_ad.title, snapshot.seconds_remaining)
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from smartad_console.models.ad import AdRecord, Gender


class PlaybackState(str, Enum):
    """
    Discrete states of the rotation scheduler.

    Attributes:
        IDLE: No target, nothing selected (standby)
        PLAYING: Counting down an active ad
        PAUSED: Explicit user pause, countdown frozen
    """

    IDLE = "IDLE"
    PLAYING = "PLAYING"
    PAUSED = "PAUSED"


class TargetView(BaseModel):
    """Serializable view of the active target."""

    model_config = ConfigDict(frozen=True)

    age: int = Field(..., ge=0)
    gender: Gender


class RotationSnapshot(BaseModel):
    """
    Read-only snapshot of the rotation scheduler.

    Attributes:
        state: Current playback state
        target: Target that produced the eligible set, if any
        eligible_ids: Catalog ids in the eligible set, in catalog order
        current_index: Index of the current ad in the eligible set
        current_ad: Ad currently selected, if any
        seconds_remaining: Countdown for the current ad
        progress: Fraction of the current showing already elapsed
        is_fallback: Whether the eligible set came from the random fallback
        ads_shown: Number of ad-shown transitions since start
    """

    model_config = ConfigDict(frozen=True)

    state: PlaybackState = Field(
        default=PlaybackState.IDLE,
        description="Current playback state",
    )

    target: Optional[TargetView] = Field(
        default=None,
        description="Target driving the current selection",
    )

    eligible_ids: List[str] = Field(
        default_factory=list,
        description="Eligible catalog ids in catalog order",
    )

    current_index: Optional[int] = Field(
        default=None,
        ge=0,
        description="Index of the current ad in the eligible set",
    )

    current_ad: Optional[AdRecord] = Field(
        default=None,
        description="Ad currently selected",
    )

    seconds_remaining: int = Field(
        default=0,
        ge=0,
        description="Seconds left for the current ad",
    )

    progress: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Elapsed fraction of the current showing",
    )

    is_fallback: bool = Field(
        default=False,
        description="Selection came from the random full-catalog fallback",
    )

    ads_shown: int = Field(
        default=0,
        ge=0,
        description="Ad-shown transitions since start",
    )

    @property
    def is_playing(self) -> bool:
        return self.state == PlaybackState.PLAYING
