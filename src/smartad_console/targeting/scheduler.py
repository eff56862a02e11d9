"""
Rotation Scheduler
==================

Explicit state machine that decides which ad is on screen and for how long.

States:
    IDLE     - no target, nothing selected
    PLAYING  - counting down the current ad
    PAUSED   - countdown frozen by the user

Transition Rules:
    TargetArrived (any state):
        eligible = select_eligible(target, catalog)
        non-empty → index 0, countdown = eligible[0].duration, PLAYING
        empty     → one ad drawn uniformly from the FULL catalog as a
                    singleton eligible set, PLAYING
    TargetCleared (any state):
        → IDLE, eligible set cleared
    Tick (PLAYING only, inert otherwise):
        countdown -= 1
        countdown == 0 → index = (index + 1) mod len(eligible),
                         countdown = new ad's duration
    TogglePlay:
        PLAYING → PAUSED (countdown frozen)
        PAUSED  → PLAYING (resumes from frozen value; a frozen 0 restarts
                  the current ad's full duration)
        IDLE    → inert

Every initial selection and every rotation advance fires the ad-shown
listeners exactly once, after the transition is fully applied.
"""

import logging
import random
from typing import Callable, List, Optional, Tuple, Union

from smartad_console.catalog import Catalog
from smartad_console.models.ad import AdRecord, Gender
from smartad_console.models.detection import Target
from smartad_console.models.events import TargetArrived, TargetCleared, Tick, TogglePlay
from smartad_console.models.state import PlaybackState, RotationSnapshot, TargetView
from smartad_console.runtime.random_source import RandomSource
from smartad_console.targeting.eligibility import select_eligible


logger = logging.getLogger(__name__)


SchedulerEvent = Union[TargetArrived, TargetCleared, Tick, TogglePlay]
AdShownListener = Callable[[str], None]


class RotationScheduler:
    """
    Targeting and rotation state machine.

    Owns the eligible set, the rotation index, the countdown and the
    playback state. All mutation goes through ``handle_event``.

    Attributes:
        catalog: Catalog ads are selected from

    Example:
        scheduler = RotationScheduler(catalog)

        @scheduler.on_ad_shown
        def log_impression(ad_id):
            print("showing", ad_id)

        scheduler.set_target(30, "female")
        scheduler.tick()
    """

    def __init__(
        self,
        catalog: Catalog,
        rng: Optional[RandomSource] = None,
    ) -> None:
        """
        Initialize rotation scheduler.

        Args:
            catalog: Non-empty ad catalog
            rng: Random source for the fallback pick
        """
        if len(catalog) == 0:
            raise ValueError("catalog must not be empty")

        self.catalog = catalog
        self._rng: RandomSource = rng or random.Random()
        self._listeners: List[AdShownListener] = []

        # Rotation state
        self._state = PlaybackState.IDLE
        self._target: Optional[Target] = None
        self._eligible: Tuple[AdRecord, ...] = ()
        self._index: Optional[int] = None
        self._seconds_remaining: int = 0
        self._is_fallback: bool = False

        # Counters
        self._ads_shown: int = 0

        logger.info(f"RotationScheduler initialized with {len(catalog)} ads")

    # =========================================================================
    # Listeners
    # =========================================================================

    def on_ad_shown(self, listener: AdShownListener) -> AdShownListener:
        """
        Register an ad-shown listener.

        Usable as a decorator. Listeners receive the catalog id of the ad
        that just went on screen.
        """
        self._listeners.append(listener)
        return listener

    def remove_listener(self, listener: AdShownListener) -> None:
        """Unregister an ad-shown listener."""
        self._listeners = [h for h in self._listeners if h != listener]

    # =========================================================================
    # Read-only state
    # =========================================================================

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state == PlaybackState.PLAYING

    @property
    def target(self) -> Optional[Target]:
        return self._target

    @property
    def eligible_set(self) -> Tuple[AdRecord, ...]:
        return self._eligible

    @property
    def current_index(self) -> Optional[int]:
        return self._index

    @property
    def current_ad(self) -> Optional[AdRecord]:
        if self._index is None:
            return None
        return self._eligible[self._index]

    @property
    def seconds_remaining(self) -> int:
        return self._seconds_remaining

    @property
    def is_fallback(self) -> bool:
        return self._is_fallback

    @property
    def ads_shown(self) -> int:
        return self._ads_shown

    def snapshot(self) -> RotationSnapshot:
        """Read-only view for the presentation layer."""
        ad = self.current_ad
        progress = 0.0
        if ad is not None:
            progress = (ad.duration_seconds - self._seconds_remaining) / ad.duration_seconds

        target = None
        if self._target is not None:
            target = TargetView(age=self._target.age, gender=self._target.gender)

        return RotationSnapshot(
            state=self._state,
            target=target,
            eligible_ids=[a.id for a in self._eligible],
            current_index=self._index,
            current_ad=ad,
            seconds_remaining=self._seconds_remaining,
            progress=progress,
            is_fallback=self._is_fallback,
            ads_shown=self._ads_shown,
        )

    # =========================================================================
    # Event entry point
    # =========================================================================

    def handle_event(self, event: SchedulerEvent) -> PlaybackState:
        """
        Apply one event to the state machine.

        The transition is applied completely before any ad-shown listener
        runs.

        Args:
            event: TargetArrived, TargetCleared, Tick or TogglePlay

        Returns:
            Playback state after the event
        """
        if isinstance(event, TargetArrived):
            shown = self._on_target_arrived(event.target)
        elif isinstance(event, TargetCleared):
            shown = self._on_target_cleared()
        elif isinstance(event, Tick):
            shown = self._on_tick()
        elif isinstance(event, TogglePlay):
            shown = self._on_toggle_play()
        else:
            raise TypeError(f"Unknown scheduler event: {event!r}")

        self._check_invariants()

        if shown is not None:
            self._emit_ad_shown(shown)

        return self._state

    # Convenience wrappers

    def set_target(self, age: int, gender: Union[Gender, str]) -> PlaybackState:
        return self.handle_event(TargetArrived(Target(age=age, gender=Gender(gender))))

    def clear_target(self) -> PlaybackState:
        return self.handle_event(TargetCleared())

    def tick(self) -> PlaybackState:
        return self.handle_event(Tick())

    def toggle_play(self) -> PlaybackState:
        return self.handle_event(TogglePlay())

    # =========================================================================
    # Transitions
    # =========================================================================

    def _on_target_arrived(self, target: Target) -> AdRecord:
        eligible = select_eligible(target, self.catalog)
        is_fallback = not eligible

        if is_fallback:
            fallback = self._rng.choice(self.catalog.ads)
            eligible = (fallback,)
            logger.info(
                f"No eligible ads for {target}, falling back to "
                f"random catalog ad {fallback.id}"
            )
        else:
            logger.debug(
                f"Target {target}: {len(eligible)} eligible "
                f"({', '.join(a.id for a in eligible)})"
            )

        self._target = target
        self._eligible = eligible
        self._is_fallback = is_fallback
        self._index = 0
        self._seconds_remaining = eligible[0].duration_seconds
        self._state = PlaybackState.PLAYING

        return eligible[0]

    def _on_target_cleared(self) -> None:
        if self._state != PlaybackState.IDLE:
            logger.info("Target cleared, scheduler idle")

        self._target = None
        self._eligible = ()
        self._is_fallback = False
        self._index = None
        self._seconds_remaining = 0
        self._state = PlaybackState.IDLE
        return None

    def _on_tick(self) -> Optional[AdRecord]:
        if self._state != PlaybackState.PLAYING:
            return None

        self._seconds_remaining -= 1
        if self._seconds_remaining > 0:
            return None

        # Countdown expired: rotate, wrapping around the eligible set
        self._index = (self._index + 1) % len(self._eligible)
        ad = self._eligible[self._index]
        self._seconds_remaining = ad.duration_seconds
        return ad

    def _on_toggle_play(self) -> None:
        if self._state == PlaybackState.PLAYING:
            self._state = PlaybackState.PAUSED
            logger.info(f"Playback paused at {self._seconds_remaining}s")
        elif self._state == PlaybackState.PAUSED:
            if self._seconds_remaining == 0:
                self._seconds_remaining = self.current_ad.duration_seconds
            self._state = PlaybackState.PLAYING
            logger.info(f"Playback resumed at {self._seconds_remaining}s")
        else:
            logger.debug("Toggle ignored: no ad selected")
        return None

    # =========================================================================
    # Helpers
    # =========================================================================

    def _emit_ad_shown(self, ad: AdRecord) -> None:
        self._ads_shown += 1
        logger.info(
            f"Showing ad {ad.id} '{ad.title}' "
            f"[{self._index + 1}/{len(self._eligible)}] for {ad.duration_seconds}s"
        )
        for listener in list(self._listeners):
            listener(ad.id)

    def _check_invariants(self) -> None:
        assert self._seconds_remaining >= 0, "negative countdown"
        if self._state == PlaybackState.IDLE:
            assert self._index is None and not self._eligible, "idle with a selection"
            return
        assert self._eligible, f"{self._state.value} with empty eligible set"
        assert self._index is not None and 0 <= self._index < len(self._eligible), (
            f"rotation index {self._index} out of range"
        )
        assert self._seconds_remaining <= self._eligible[self._index].duration_seconds, (
            "countdown exceeds ad duration"
        )
        if self._state == PlaybackState.PLAYING:
            assert self._seconds_remaining > 0, "playing with expired countdown"
