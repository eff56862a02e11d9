"""
SmartAd Console
===============

Session object wiring the sampler, the rotation scheduler and the analytics
aggregator together.

Data Flow:
    DetectionSampler ──DetectedPerson──▶ RotationScheduler (re-target)
                                   └───▶ AnalyticsAggregator (log entry)
    RotationScheduler ──ad id──▶ AnalyticsAggregator (impressions)
                             └─▶ registered on_ad_shown listeners

Lifecycle:
    start() - inside a running event loop; starts the rotation tick timer
              and, if configured, the sampler
    stop()  - cancels every timer started by start() or toggle_active()

All callbacks run on one event loop, so a target arrival is fully applied
before the next tick or sampler callback runs.
"""

import logging
import random
import time
from typing import Callable, List, Optional, Union

from smartad_console.catalog import Catalog, load_catalog
from smartad_console.config import Settings
from smartad_console.models.ad import Gender
from smartad_console.models.detection import DetectedPerson, Target
from smartad_console.models.events import TargetArrived, TargetCleared, TogglePlay
from smartad_console.models.output import (
    ConsoleOutput,
    OverlayView,
    SensorStatus,
    SessionStatus,
)
from smartad_console.models.state import PlaybackState, RotationSnapshot
from smartad_console.observability import AnalyticsAggregator
from smartad_console.runtime import PeriodicTimer, RandomSource, create_random_source
from smartad_console.sensor import DetectionSampler, SensorPolicy, SimulatedSensor
from smartad_console.targeting import AdShownListener, RotationScheduler


logger = logging.getLogger(__name__)


def format_uptime(seconds: float) -> str:
    """Format seconds as "Xh Ym"."""
    total = int(seconds)
    hours = total // 3600
    minutes = (total % 3600) // 60
    return f"{hours}h {minutes}m"


class SmartAdConsole:
    """
    Demonstration console: simulated detections drive targeted ad rotation.

    Attributes:
        scheduler: Rotation state machine
        aggregator: Detection log and statistics
        sampler: Periodic sensor driver

    Example:
        console = SmartAdConsole.from_settings(settings)
        console.start()
        console.toggle_active()
        ...
        output = console.snapshot()
        console.stop()
    """

    def __init__(
        self,
        catalog: Catalog,
        rng: Optional[RandomSource] = None,
        sensor: Optional[SensorPolicy] = None,
        tick_interval: float = 1.0,
        sampler_period: float = 2.0,
        sampler_jitter: float = 0.0,
        dwell_seconds: float = 3.0,
        max_log_entries: int = 100,
        recent_window_ms: int = 60_000,
        activity_limit: int = 10,
        start_active: bool = False,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the console.

        Args:
            catalog: Ad catalog
            rng: Random source shared by the fallback policy, the simulated
                sensor and sampler jitter
            sensor: Detection source (SimulatedSensor by default)
            tick_interval: Seconds per countdown tick
            sampler_period: Seconds between sensor polls
            sampler_jitter: Max random extra delay per poll
            dwell_seconds: Overlay lifetime
            max_log_entries: Detection log capacity
            recent_window_ms: Window for the recent detections count
            activity_limit: Rows in the recent activity feed
            start_active: Activate the sampler on start()
            clock: Source of "now" in UNIX seconds
        """
        self._rng: RandomSource = rng or random.Random()
        self._clock = clock
        self.recent_window_ms = recent_window_ms
        self.activity_limit = activity_limit
        self.start_active = start_active

        self.scheduler = RotationScheduler(catalog, rng=self._rng)
        self.aggregator = AnalyticsAggregator(max_entries=max_log_entries, clock=clock)
        self.scheduler.on_ad_shown(self.aggregator.record_impression)

        self.sensor: SensorPolicy = sensor or SimulatedSensor(self._rng)
        self.sampler = DetectionSampler(
            sensor=self.sensor,
            on_detection=self.handle_detection,
            period_seconds=sampler_period,
            dwell_seconds=dwell_seconds,
            jitter_seconds=sampler_jitter,
            rng=self._rng,
            on_unavailable=self._on_sensor_unavailable,
        )
        self.tick_timer = PeriodicTimer("rotation_tick", tick_interval, self.scheduler.tick)

        self._started_at: Optional[float] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmartAdConsole":
        """Build a console from loaded settings."""
        rng = create_random_source(settings.random.seed)
        sampler_cfg = settings.sampler
        sensor = SimulatedSensor(
            rng,
            detection_probability=sampler_cfg.detection_probability,
            min_age=sampler_cfg.min_age,
            max_age=sampler_cfg.max_age,
            min_confidence=sampler_cfg.min_confidence,
            max_confidence=sampler_cfg.max_confidence,
        )
        return cls(
            catalog=load_catalog(settings.catalog.path),
            rng=rng,
            sensor=sensor,
            tick_interval=settings.rotation.tick_interval_seconds,
            sampler_period=sampler_cfg.period_seconds,
            sampler_jitter=sampler_cfg.jitter_seconds,
            dwell_seconds=sampler_cfg.dwell_seconds,
            max_log_entries=settings.analytics.max_log_entries,
            recent_window_ms=settings.analytics.recent_window_ms,
            activity_limit=settings.analytics.recent_activity_limit,
            start_active=sampler_cfg.start_active,
        )

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def running(self) -> bool:
        return self._started_at is not None

    def start(self) -> None:
        """Start the session timers. Must run inside an event loop."""
        if self.running:
            logger.debug("Console already running")
            return

        self._started_at = self._clock()
        self.tick_timer.start()
        if self.start_active:
            self.sampler.activate()
        logger.info("SmartAd console started")

    def stop(self) -> None:
        """Cancel all timers. Safe to call more than once."""
        self.sampler.deactivate()
        self.tick_timer.stop()
        if self.running:
            logger.info(f"SmartAd console stopped after {format_uptime(self.uptime_seconds)}")
        self._started_at = None

    @property
    def uptime_seconds(self) -> int:
        if self._started_at is None:
            return 0
        return max(0, int(self._clock() - self._started_at))

    @property
    def failed_timers(self) -> List[str]:
        """Names of timers that an invariant violation has stopped."""
        return [t.name for t in (self.tick_timer, self.sampler.timer) if t.failed]

    @property
    def healthy(self) -> bool:
        return not self.failed_timers

    # =========================================================================
    # Inbound events
    # =========================================================================

    def handle_detection(self, person: DetectedPerson) -> None:
        """Re-target on a sensor detection and log it."""
        self.scheduler.handle_event(TargetArrived(person.target))
        ad = self.scheduler.current_ad
        self.aggregator.record_detection(person, ad.id if ad is not None else None)

    def _on_sensor_unavailable(self) -> None:
        logger.warning("Sensor reported permanent inactivity, clearing target")
        self.scheduler.handle_event(TargetCleared())

    # =========================================================================
    # User commands
    # =========================================================================

    def toggle_play(self) -> PlaybackState:
        return self.scheduler.handle_event(TogglePlay())

    def toggle_active(self) -> bool:
        """Start or stop detection sampling. Returns the new active flag."""
        return self.sampler.toggle()

    def set_target(self, age: int, gender: Union[Gender, str]) -> PlaybackState:
        """Target an audience manually (not logged as a detection)."""
        return self.scheduler.handle_event(TargetArrived(Target(age=age, gender=Gender(gender))))

    def clear_target(self) -> PlaybackState:
        return self.scheduler.handle_event(TargetCleared())

    def on_ad_shown(self, listener: AdShownListener) -> AdShownListener:
        return self.scheduler.on_ad_shown(listener)

    # =========================================================================
    # Outbound snapshots
    # =========================================================================

    def rotation(self) -> RotationSnapshot:
        return self.scheduler.snapshot()

    def status(self) -> SessionStatus:
        overlay = self.sampler.overlay
        return SessionStatus(
            is_active=self.sampler.active,
            sensor=SensorStatus(
                active=self.sampler.active,
                available=self.sampler.available,
                frame_rate=round(self.sampler.frame_rate, 1),
                overlay=OverlayView.from_detection(overlay) if overlay else None,
                detections_emitted=self.sampler.detections_emitted,
            ),
            uptime_seconds=self.uptime_seconds,
            uptime_display=format_uptime(self.uptime_seconds),
            failed_timers=self.failed_timers,
        )

    def snapshot(self) -> ConsoleOutput:
        """Complete read-only console snapshot."""
        return ConsoleOutput(
            timestamp=self._clock(),
            rotation=self.rotation(),
            analytics=self.aggregator.summary(
                recent_window_ms=self.recent_window_ms,
                activity_limit=self.activity_limit,
            ),
            session=self.status(),
        )
