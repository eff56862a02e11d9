"""
Sensor Engine
=============

Sensor abstraction for the detection sampler.

This module provides the SensorPolicy protocol and the SimulatedSensor
implementation. No frames are captured and no inference model runs here;
a sensor only decides, once per sampling period, whether a person is
detected and with which demographics.

Design Rules:
    - One poll() per sampling period, zero or one DetectedPerson per poll
    - Permanent unavailability (e.g. camera permission denied) is signalled
      by raising SensorUnavailableError
    - All randomness comes from the injected RandomSource
"""

import logging
import uuid
from typing import Callable, Optional, Protocol

from smartad_console.models.ad import Gender
from smartad_console.models.detection import DetectedPerson, Position
from smartad_console.runtime.random_source import RandomSource


logger = logging.getLogger(__name__)


class SensorUnavailableError(RuntimeError):
    """Raised by a sensor that can no longer produce detections."""


class SensorPolicy(Protocol):
    """
    Protocol for detection sources.

    All implementations must provide ``poll`` and a ``frame_rate``
    property.

    This interface is implemented by:
        - SimulatedSensor (demo feed)
    """

    @property
    def frame_rate(self) -> float:
        """Current frames per second of the feed."""
        ...

    def poll(self) -> Optional[DetectedPerson]:
        """
        Sample the feed once.

        Returns:
            DetectedPerson, or None when nobody was detected

        Raises:
            SensorUnavailableError: If the sensor is permanently inactive
        """
        ...


def _default_id() -> str:
    return uuid.uuid4().hex[:12]


class SimulatedSensor:
    """
    Random demographic feed for demonstrations.

    Each poll draws from the random source in a fixed order:
        1. frame rate (20-30 FPS)
        2. detection check (emit when draw < detection_probability)
        3. age, gender, confidence, x, y (only when emitting)

    Attributes:
        detection_probability: Chance of a detection per poll
        min_age, max_age: Inclusive age range of simulated people
        min_confidence, max_confidence: Confidence range
    """

    def __init__(
        self,
        rng: RandomSource,
        detection_probability: float = 0.3,
        min_age: int = 15,
        max_age: int = 74,
        min_confidence: float = 0.80,
        max_confidence: float = 0.95,
        id_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        """
        Initialize simulated sensor.

        Args:
            rng: Random source for all draws
            detection_probability: Chance of a detection per poll, in [0, 1]
            min_age: Youngest simulated age
            max_age: Oldest simulated age
            min_confidence: Lowest simulated confidence
            max_confidence: Highest simulated confidence
            id_factory: Detection id generator (uuid-based by default)
        """
        if not 0.0 <= detection_probability <= 1.0:
            raise ValueError("detection_probability must be in [0, 1]")
        if not 0 <= min_age <= max_age:
            raise ValueError("age range must satisfy 0 <= min_age <= max_age")
        if not 0.0 <= min_confidence <= max_confidence <= 1.0:
            raise ValueError("confidence range must lie inside [0, 1]")

        self._rng = rng
        self.detection_probability = detection_probability
        self.min_age = min_age
        self.max_age = max_age
        self.min_confidence = min_confidence
        self.max_confidence = max_confidence
        self._id_factory = id_factory or _default_id
        self._frame_rate: float = 0.0

        logger.info(
            f"SimulatedSensor initialized: p={detection_probability}, "
            f"ages={min_age}-{max_age}"
        )

    @property
    def frame_rate(self) -> float:
        return self._frame_rate

    def poll(self) -> Optional[DetectedPerson]:
        rng = self._rng
        self._frame_rate = 20.0 + rng.random() * 10.0

        if rng.random() >= self.detection_probability:
            return None

        age_span = self.max_age - self.min_age + 1
        age = self.min_age + min(int(rng.random() * age_span), age_span - 1)
        gender = Gender.MALE if rng.random() > 0.5 else Gender.FEMALE
        confidence = self.min_confidence + rng.random() * (self.max_confidence - self.min_confidence)

        # Keep overlays inside the central 60% of the frame
        position = Position(x=0.2 + rng.random() * 0.6, y=0.2 + rng.random() * 0.6)

        return DetectedPerson(
            id=self._id_factory(),
            age=age,
            gender=gender,
            confidence=confidence,
            position=position,
        )
