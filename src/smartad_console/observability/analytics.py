"""
Analytics Module
================

Bounded detection log and the rolling statistics derived from it.

This module computes analytics for observability ONLY.
Analytics do NOT influence targeting decisions.

Log Rules:
    - Bounded (default 100 entries), chronological
    - Drops the oldest entry on overflow (FIFO)
    - Only record() mutates the log

Derived Queries (recomputed on every call, no incremental counters):
    - recent_count(window_ms): entries with now - timestamp < window
    - gender_distribution(): count per gender
    - age_buckets(): <25, 25-44, >=45
    - average_age(): mean age, 0 for an empty log
"""

import logging
import time
from collections import Counter, deque
from typing import Callable, Deque, Dict, List, Optional, Tuple

from smartad_console.models.ad import Gender
from smartad_console.models.detection import DetectedPerson, DetectionLogEntry
from smartad_console.models.output import ActivityEntry, AgeBuckets, AnalyticsSummary


logger = logging.getLogger(__name__)


YOUNG_UPPER_AGE = 25
ADULT_UPPER_AGE = 45


class AnalyticsAggregator:
    """
    Bounded detection log with derived dashboard statistics.

    Attributes:
        max_entries: Log capacity
        evicted_count: Entries dropped due to overflow

    Example:
        aggregator = AnalyticsAggregator(max_entries=100)
        aggregator.record(DetectionLogEntry(time.time(), 30, Gender.FEMALE, "1"))

        print(aggregator.average_age(), aggregator.age_buckets())
    """

    def __init__(
        self,
        max_entries: int = 100,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize analytics aggregator.

        Args:
            max_entries: Log capacity. Must be >= 1.
            clock: Source of "now" in UNIX seconds
        """
        if max_entries < 1:
            raise ValueError("max_entries must be >= 1")

        self.max_entries = max_entries
        self._clock = clock
        self._log: Deque[DetectionLogEntry] = deque(maxlen=max_entries)
        self._impressions: Counter = Counter()
        self.evicted_count: int = 0

    # =========================================================================
    # Mutation
    # =========================================================================

    def record(self, entry: DetectionLogEntry) -> None:
        """Append an entry, evicting the oldest when full."""
        if len(self._log) == self.max_entries:
            self.evicted_count += 1
        self._log.append(entry)

    def record_detection(
        self,
        person: DetectedPerson,
        ad_shown_id: Optional[str] = None,
    ) -> DetectionLogEntry:
        """Log a detection stamped with the current clock."""
        entry = DetectionLogEntry(
            timestamp=self._clock(),
            age=person.age,
            gender=person.gender,
            ad_shown_id=ad_shown_id,
        )
        self.record(entry)
        return entry

    def record_impression(self, ad_id: str) -> None:
        """Count one ad-shown transition. Suitable as an on_ad_shown listener."""
        self._impressions[ad_id] += 1

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def entries(self) -> Tuple[DetectionLogEntry, ...]:
        """Snapshot of the log, oldest first."""
        return tuple(self._log)

    def __len__(self) -> int:
        return len(self._log)

    def recent_count(self, window_ms: float, now: Optional[float] = None) -> int:
        """
        Count entries newer than the window.

        Args:
            window_ms: Window width in milliseconds
            now: Reference time in UNIX seconds (defaults to the clock)
        """
        if now is None:
            now = self._clock()
        return sum(1 for e in self._log if (now - e.timestamp) * 1000.0 < window_ms)

    def gender_distribution(self) -> Dict[Gender, int]:
        """Count per gender. Both genders are always present."""
        counts = {gender: 0 for gender in Gender}
        for entry in self._log:
            counts[entry.gender] += 1
        return counts

    def gender_share(self) -> Dict[Gender, float]:
        """Percentage (0-100) per gender; all zero for an empty log."""
        total = len(self._log)
        distribution = self.gender_distribution()
        if total == 0:
            return {gender: 0.0 for gender in distribution}
        return {gender: count / total * 100.0 for gender, count in distribution.items()}

    def age_buckets(self) -> AgeBuckets:
        """Partition ages into <25, 25-44 and >=45."""
        young = adult = senior = 0
        for entry in self._log:
            if entry.age < YOUNG_UPPER_AGE:
                young += 1
            elif entry.age < ADULT_UPPER_AGE:
                adult += 1
            else:
                senior += 1
        return AgeBuckets(young=young, adult=adult, senior=senior)

    def average_age(self) -> float:
        """Arithmetic mean of logged ages, 0 when empty."""
        if not self._log:
            return 0
        return sum(e.age for e in self._log) / len(self._log)

    def impressions(self) -> Dict[str, int]:
        """Ad-shown count per catalog id."""
        return dict(self._impressions)

    def recent_activity(self, limit: int = 10) -> List[DetectionLogEntry]:
        """Latest entries, newest first."""
        if limit <= 0:
            return []
        return list(reversed(self._log))[:limit]

    def summary(
        self,
        recent_window_ms: int = 60_000,
        activity_limit: int = 10,
    ) -> AnalyticsSummary:
        """
        Compute the full dashboard summary.

        Args:
            recent_window_ms: Width of the "recent detections" window
            activity_limit: Number of activity rows to include

        Returns:
            AnalyticsSummary snapshot
        """
        return AnalyticsSummary(
            total_detections=len(self._log),
            recent_detections=self.recent_count(recent_window_ms),
            recent_window_ms=recent_window_ms,
            gender_distribution={g.value: n for g, n in self.gender_distribution().items()},
            gender_share={g.value: round(p, 1) for g, p in self.gender_share().items()},
            age_buckets=self.age_buckets(),
            average_age=round(self.average_age(), 1),
            impressions=self.impressions(),
            recent_activity=[
                ActivityEntry(
                    timestamp=e.timestamp,
                    age=e.age,
                    gender=e.gender,
                    ad_shown_id=e.ad_shown_id,
                )
                for e in self.recent_activity(activity_limit)
            ],
        )

