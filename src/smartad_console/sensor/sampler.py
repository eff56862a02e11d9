"""
Detection Sampler
=================

Periodic driver that polls the sensor while active and manages the
detection overlay.

Timers:
    - Emission check: PeriodicTimer polling the sensor every period
      (optionally jittered)
    - Overlay expiry: one loop.call_later handle per emitted detection;
      each clears the overlay at emission + dwell, whether or not a newer
      detection has replaced it since

Lifecycle:
    activate()   → starts the emission timer
    deactivate() → cancels the emission timer and any pending expiry,
                   clears the overlay immediately

The sampler keeps no history; recording is the aggregator's job.
"""

import asyncio
import logging
from typing import Callable, Dict, Optional

from smartad_console.models.detection import DetectedPerson
from smartad_console.runtime.random_source import RandomSource
from smartad_console.runtime.timers import PeriodicTimer
from smartad_console.sensor.engine import SensorPolicy, SensorUnavailableError


logger = logging.getLogger(__name__)


DetectionHandler = Callable[[DetectedPerson], None]


class DetectionSampler:
    """
    Emits sensor detections on a fixed or jittered period.

    Attributes:
        sensor: Detection source
        period_seconds: Base emission-check period
        dwell_seconds: Overlay lifetime after each emission
        detections_emitted: Detections forwarded since creation

    Example:
        sampler = DetectionSampler(
            sensor=SimulatedSensor(rng),
            on_detection=console.handle_detection,
            period_seconds=2.0,
            dwell_seconds=3.0,
        )
        sampler.activate()   # inside a running event loop
    """

    def __init__(
        self,
        sensor: SensorPolicy,
        on_detection: DetectionHandler,
        period_seconds: float = 2.0,
        dwell_seconds: float = 3.0,
        jitter_seconds: float = 0.0,
        rng: Optional[RandomSource] = None,
        on_unavailable: Optional[Callable[[], None]] = None,
    ) -> None:
        """
        Initialize detection sampler.

        Args:
            sensor: Sensor to poll
            on_detection: Called with every emitted DetectedPerson
            period_seconds: Seconds between sensor polls
            dwell_seconds: Seconds an overlay stays visible
            jitter_seconds: Max random extra delay per period
            rng: Random source for jitter
            on_unavailable: Called once if the sensor becomes unavailable
        """
        if dwell_seconds <= 0:
            raise ValueError("dwell_seconds must be positive")

        self.sensor = sensor
        self.period_seconds = period_seconds
        self.dwell_seconds = dwell_seconds
        self._on_detection = on_detection
        self._on_unavailable = on_unavailable

        self._timer = PeriodicTimer(
            "detection_sampler",
            period_seconds,
            self.sample_once,
            jitter=jitter_seconds,
            rng=rng,
        )

        # State
        self._active: bool = False
        self._available: bool = True
        self._overlay: Optional[DetectedPerson] = None
        self._expiry_handles: Dict[int, asyncio.TimerHandle] = {}
        self._expiry_seq: int = 0

        # Metrics
        self.detections_emitted: int = 0

    @property
    def active(self) -> bool:
        return self._active

    @property
    def available(self) -> bool:
        """False once the sensor reported permanent inactivity."""
        return self._available

    @property
    def overlay(self) -> Optional[DetectedPerson]:
        """Detection currently drawn on the feed, if any."""
        return self._overlay

    @property
    def frame_rate(self) -> float:
        return self.sensor.frame_rate if self._active else 0.0

    @property
    def timer(self) -> PeriodicTimer:
        return self._timer

    @property
    def overlay_expiry_pending(self) -> bool:
        return bool(self._expiry_handles)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def activate(self) -> bool:
        """
        Start sampling.

        Returns:
            True if the sampler is now active, False if the sensor is
            unavailable.
        """
        if not self._available:
            logger.warning("Cannot activate sampler: sensor unavailable")
            return False
        if self._active:
            return True

        self._active = True
        self._timer.start()
        logger.info(
            f"Detection sampler active (period={self.period_seconds}s, "
            f"dwell={self.dwell_seconds}s)"
        )
        return True

    def deactivate(self) -> None:
        """Stop sampling, cancel pending timers and clear the overlay."""
        was_active = self._active
        self._active = False
        self._timer.stop()
        self._clear_overlay()
        if was_active:
            logger.info("Detection sampler inactive")

    def toggle(self) -> bool:
        """Flip the active flag. Returns the new value."""
        if self._active:
            self.deactivate()
            return False
        return self.activate()

    # =========================================================================
    # Sampling
    # =========================================================================

    def sample_once(self) -> Optional[DetectedPerson]:
        """
        Poll the sensor once.

        Called by the emission timer; may also be called directly inside a
        running event loop.

        Returns:
            The emitted detection, or None
        """
        if not self._active:
            return None

        try:
            person = self.sensor.poll()
        except SensorUnavailableError as e:
            logger.warning(f"Sensor unavailable: {e}")
            self._available = False
            self.deactivate()
            if self._on_unavailable is not None:
                self._on_unavailable()
            return None

        if person is None:
            return None

        self._show_overlay(person)
        self.detections_emitted += 1
        logger.debug(
            f"Detected {person.age}y {person.gender.value} "
            f"(conf={person.confidence:.2f}, id={person.id})"
        )
        self._on_detection(person)
        return person

    def _show_overlay(self, person: DetectedPerson) -> None:
        loop = asyncio.get_running_loop()
        self._overlay = person
        self._expiry_seq += 1
        self._expiry_handles[self._expiry_seq] = loop.call_later(
            self.dwell_seconds, self._expire_overlay, self._expiry_seq
        )

    def _expire_overlay(self, seq: int) -> None:
        # Each emission clears the overlay at its own deadline, even if a
        # newer detection is drawn
        self._expiry_handles.pop(seq, None)
        self._overlay = None

    def _clear_overlay(self) -> None:
        for handle in self._expiry_handles.values():
            handle.cancel()
        self._expiry_handles.clear()
        self._overlay = None
