"""
Analytics Aggregator Tests
==========================

Bounded log behaviour and derived statistics.
"""

import pytest

from smartad_console.models.ad import Gender
from smartad_console.models.detection import DetectionLogEntry
from smartad_console.observability import AnalyticsAggregator


NOW = 1_700_000_000.0


def _entry(age=30, gender=Gender.FEMALE, timestamp=NOW, ad_id="1"):
    return DetectionLogEntry(timestamp=timestamp, age=age, gender=gender, ad_shown_id=ad_id)


@pytest.fixture
def aggregator():
    return AnalyticsAggregator(max_entries=100, clock=lambda: NOW)


class TestBoundedLog:
    """Tests for the FIFO-bounded detection log."""

    def test_rejects_zero_capacity(self):
        """Capacity must be at least one."""
        with pytest.raises(ValueError):
            AnalyticsAggregator(max_entries=0)

    def test_keeps_most_recent_hundred(self, aggregator):
        """After 150 inserts exactly the last 100 remain, in order."""
        for i in range(150):
            aggregator.record(_entry(age=i % 90, timestamp=NOW + i))

        entries = aggregator.entries
        assert len(aggregator) == 100
        assert [e.timestamp for e in entries] == [NOW + i for i in range(50, 150)]
        assert aggregator.evicted_count == 50

    def test_under_capacity_keeps_everything(self, aggregator):
        """No eviction below the cap."""
        for i in range(100):
            aggregator.record(_entry(timestamp=NOW + i))
        assert len(aggregator) == 100
        assert aggregator.evicted_count == 0
        assert aggregator.entries[0].timestamp == NOW

    def test_record_detection_stamps_clock(self, aggregator, make_person):
        """record_detection uses the injected clock and the shown ad id."""
        entry = aggregator.record_detection(make_person(age=41, gender="male"), "2")
        assert entry == DetectionLogEntry(timestamp=NOW, age=41, gender=Gender.MALE, ad_shown_id="2")
        assert aggregator.entries == (entry,)


class TestDerivedQueries:
    """Tests for the read-only statistics."""

    def test_average_age_empty_is_zero(self, aggregator):
        """Empty log averages to 0, not an error."""
        assert aggregator.average_age() == 0

    def test_average_age(self, aggregator):
        """Mean of 20, 30, 40 is 30."""
        for age in (20, 30, 40):
            aggregator.record(_entry(age=age))
        assert aggregator.average_age() == 30

    def test_recent_count_window_is_strict(self, aggregator):
        """Entries exactly window_ms old are outside the window."""
        aggregator.record(_entry(timestamp=NOW - 120))
        aggregator.record(_entry(timestamp=NOW - 60))
        aggregator.record(_entry(timestamp=NOW - 59.5))
        aggregator.record(_entry(timestamp=NOW - 1))
        aggregator.record(_entry(timestamp=NOW))

        assert aggregator.recent_count(60_000) == 3
        assert aggregator.recent_count(1_000) == 1
        assert aggregator.recent_count(60_000, now=NOW + 100) == 0

    def test_gender_distribution(self, aggregator):
        """Counts per gender, zero included."""
        assert aggregator.gender_distribution() == {Gender.MALE: 0, Gender.FEMALE: 0}

        aggregator.record(_entry(gender=Gender.MALE))
        aggregator.record(_entry(gender=Gender.FEMALE))
        aggregator.record(_entry(gender=Gender.FEMALE))
        assert aggregator.gender_distribution() == {Gender.MALE: 1, Gender.FEMALE: 2}

    def test_gender_share(self, aggregator):
        """Percentages sum to 100 and are zero for an empty log."""
        assert aggregator.gender_share() == {Gender.MALE: 0.0, Gender.FEMALE: 0.0}

        for gender in (Gender.MALE, Gender.FEMALE, Gender.FEMALE, Gender.FEMALE):
            aggregator.record(_entry(gender=gender))
        share = aggregator.gender_share()
        assert share[Gender.MALE] == pytest.approx(25.0)
        assert share[Gender.FEMALE] == pytest.approx(75.0)

    @pytest.mark.parametrize("age,bucket", [
        (0, "young"), (24, "young"),
        (25, "adult"), (44, "adult"),
        (45, "senior"), (90, "senior"),
    ])
    def test_age_bucket_boundaries(self, aggregator, age, bucket):
        """Lower bounds inclusive, upper exclusive, top open-ended."""
        aggregator.record(_entry(age=age))
        buckets = aggregator.age_buckets()
        assert getattr(buckets, bucket) == 1
        assert buckets.total == 1

    def test_queries_do_not_mutate(self, aggregator):
        """Queries leave the log untouched and agree on repeat calls."""
        for age in (18, 33, 52):
            aggregator.record(_entry(age=age))
        before = aggregator.entries

        first = (aggregator.recent_count(60_000), aggregator.gender_distribution(),
                 aggregator.age_buckets(), aggregator.average_age())
        second = (aggregator.recent_count(60_000), aggregator.gender_distribution(),
                  aggregator.age_buckets(), aggregator.average_age())

        assert first == second
        assert aggregator.entries == before

    def test_recent_activity_newest_first(self, aggregator):
        """Activity feed is reversed and limited."""
        for i in range(15):
            aggregator.record(_entry(age=20 + i, timestamp=NOW + i))

        activity = aggregator.recent_activity(10)
        assert [e.age for e in activity] == list(range(34, 24, -1))
        assert aggregator.recent_activity(0) == []

    def test_impressions(self, aggregator):
        """Impressions count ad-shown notifications per id."""
        for ad_id in ("1", "4", "1"):
            aggregator.record_impression(ad_id)
        assert aggregator.impressions() == {"1": 2, "4": 1}


class TestSummary:
    """Tests for the dashboard summary model."""

    def test_summary(self, aggregator):
        """Summary packages every statistic."""
        aggregator.record(_entry(age=20, gender=Gender.MALE, timestamp=NOW - 120, ad_id="2"))
        aggregator.record(_entry(age=30, gender=Gender.FEMALE, timestamp=NOW - 5, ad_id="1"))
        aggregator.record(_entry(age=47, gender=Gender.FEMALE, timestamp=NOW, ad_id=None))
        aggregator.record_impression("1")

        summary = aggregator.summary(recent_window_ms=60_000, activity_limit=2)

        assert summary.total_detections == 3
        assert summary.recent_detections == 2
        assert summary.gender_distribution == {"male": 1, "female": 2}
        assert summary.gender_share == {"male": 33.3, "female": 66.7}
        assert summary.age_buckets.model_dump() == {"young": 1, "adult": 1, "senior": 1}
        assert summary.average_age == pytest.approx(32.3)
        assert summary.impressions == {"1": 1}
        assert [a.age for a in summary.recent_activity] == [47, 30]

    def test_empty_summary(self, aggregator):
        """Empty log summarizes to zeros."""
        summary = aggregator.summary()
        assert summary.total_detections == 0
        assert summary.average_age == 0
        assert summary.recent_activity == []
