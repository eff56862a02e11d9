"""
Sensor and Sampler Tests
========================

Simulated sensor draws, sampler emission, overlay expiry and teardown.

Async behaviour runs on a fresh event loop via asyncio.run().
"""

import asyncio

import pytest

from smartad_console.models.ad import Gender
from smartad_console.sensor import DetectionSampler, SensorUnavailableError, SimulatedSensor


class TestSimulatedSensor:
    """Tests for the random demographic feed."""

    def test_no_detection_above_probability(self, scripted_random):
        """A detection draw at or above p emits nothing but updates frame rate."""
        sensor = SimulatedSensor(scripted_random(values=[0.5, 0.3]), detection_probability=0.3)
        assert sensor.poll() is None
        assert sensor.frame_rate == pytest.approx(25.0)

    def test_detection_fields(self, scripted_random):
        """Draw order: frame rate, check, age, gender, confidence, x, y."""
        rng = scripted_random(values=[0.0, 0.1, 0.5, 0.7, 0.0, 0.5, 1.0 - 1e-9])
        sensor = SimulatedSensor(rng, detection_probability=0.3, id_factory=lambda: "p1")

        person = sensor.poll()

        assert person.id == "p1"
        assert person.age == 45
        assert person.gender == Gender.MALE
        assert person.confidence == pytest.approx(0.80)
        assert person.position.x == pytest.approx(0.5)
        assert person.position.y == pytest.approx(0.8)
        assert sensor.frame_rate == pytest.approx(20.0)

    def test_age_stays_in_range(self, scripted_random):
        """Extreme draws map to the configured bounds."""
        low = SimulatedSensor(scripted_random(values=[0.0, 0.0, 0.0]), min_age=15, max_age=74)
        high = SimulatedSensor(scripted_random(values=[0.0, 0.0, 0.999999]), min_age=15, max_age=74)
        assert low.poll().age == 15
        assert high.poll().age == 74

    def test_female_on_low_gender_draw(self, scripted_random):
        """Gender draw of 0.5 or below is female."""
        sensor = SimulatedSensor(scripted_random(values=[0.0, 0.0, 0.2, 0.5]))
        assert sensor.poll().gender == Gender.FEMALE

    def test_unique_default_ids(self):
        """Default ids are unique per emission."""
        import random

        sensor = SimulatedSensor(random.Random(3), detection_probability=1.0)
        ids = {sensor.poll().id for _ in range(50)}
        assert len(ids) == 50

    @pytest.mark.parametrize("kwargs", [
        {"detection_probability": 1.5},
        {"min_age": 50, "max_age": 20},
        {"min_confidence": 0.9, "max_confidence": 0.5},
    ])
    def test_invalid_parameters(self, scripted_random, kwargs):
        """Out-of-range parameters are rejected at construction."""
        with pytest.raises(ValueError):
            SimulatedSensor(scripted_random(), **kwargs)


class TestDetectionSampler:
    """Tests for DetectionSampler emission and overlay handling."""

    def test_inactive_sampler_does_not_poll(self, scripted_sensor, make_person):
        """sample_once is a no-op while inactive."""
        sensor = scripted_sensor([make_person()])
        sampler = DetectionSampler(sensor, on_detection=lambda p: None)
        assert sampler.sample_once() is None
        assert sensor.poll_count == 0

    def test_emission_forwards_and_sets_overlay(self, scripted_sensor, make_person):
        """An emitted detection reaches the handler and shows the overlay."""
        person = make_person()
        received = []

        async def scenario():
            sampler = DetectionSampler(
                scripted_sensor([person]), on_detection=received.append,
                period_seconds=60, dwell_seconds=60,
            )
            sampler.activate()
            emitted = sampler.sample_once()
            overlay = sampler.overlay
            sampler.deactivate()
            return emitted, overlay, sampler.detections_emitted

        emitted, overlay, count = asyncio.run(scenario())
        assert emitted is person
        assert overlay is person
        assert received == [person]
        assert count == 1

    def test_overlay_expires_after_dwell(self, scripted_sensor, make_person):
        """The overlay clears itself without a new detection."""

        async def scenario():
            sampler = DetectionSampler(
                scripted_sensor([make_person()]), on_detection=lambda p: None,
                period_seconds=60, dwell_seconds=0.05,
            )
            sampler.activate()
            sampler.sample_once()
            visible = sampler.overlay is not None
            await asyncio.sleep(0.15)
            expired = sampler.overlay is None
            sampler.deactivate()
            return visible, expired

        assert asyncio.run(scenario()) == (True, True)

    def test_overlay_cleared_at_first_emission_deadline(self, scripted_sensor, make_person):
        """A newer detection does not extend the earlier emission's dwell window."""
        first, second = make_person(), make_person()

        async def scenario():
            sampler = DetectionSampler(
                scripted_sensor([first, second]), on_detection=lambda p: None,
                period_seconds=60, dwell_seconds=0.3,
            )
            sampler.activate()
            sampler.sample_once()
            await asyncio.sleep(0.2)
            sampler.sample_once()
            replaced = sampler.overlay
            await asyncio.sleep(0.15)
            after_first_deadline = sampler.overlay
            second_pending = sampler.overlay_expiry_pending
            await asyncio.sleep(0.3)
            pending_at_end = sampler.overlay_expiry_pending
            sampler.deactivate()
            return replaced, after_first_deadline, second_pending, pending_at_end

        replaced, after_first_deadline, second_pending, pending_at_end = asyncio.run(scenario())
        assert replaced is second
        assert after_first_deadline is None
        assert second_pending is True
        assert pending_at_end is False

    def test_timer_drives_polls_until_deactivated(self, scripted_sensor):
        """The periodic timer polls while active and stops on deactivate."""
        sensor = scripted_sensor()

        async def scenario():
            sampler = DetectionSampler(sensor, on_detection=lambda p: None, period_seconds=0.01)
            sampler.activate()
            await asyncio.sleep(0.1)
            sampler.deactivate()
            polls = sensor.poll_count
            await asyncio.sleep(0.05)
            return polls, sensor.poll_count, sampler

        polls, later, sampler = asyncio.run(scenario())
        assert polls >= 3
        assert later == polls
        assert sampler.timer.cancel_count == 1

    def test_deactivate_clears_overlay_and_cancels_timers(self, scripted_sensor, make_person):
        """Deactivation cancels the poll timer and the pending expiry at once."""

        async def scenario():
            sampler = DetectionSampler(
                scripted_sensor([make_person()]), on_detection=lambda p: None,
                period_seconds=60, dwell_seconds=60,
            )
            sampler.activate()
            sampler.sample_once()
            assert sampler.overlay_expiry_pending
            sampler.deactivate()
            sampler.deactivate()
            return sampler

        sampler = asyncio.run(scenario())
        assert sampler.active is False
        assert sampler.overlay is None
        assert sampler.overlay_expiry_pending is False
        assert sampler.timer.running is False
        assert sampler.timer.cancel_count == 1
        assert sampler.frame_rate == 0.0

    def test_toggle(self, scripted_sensor):
        """toggle() flips the active flag."""

        async def scenario():
            sampler = DetectionSampler(scripted_sensor(), on_detection=lambda p: None, period_seconds=60)
            states = [sampler.toggle(), sampler.toggle(), sampler.toggle()]
            sampler.deactivate()
            return states

        assert asyncio.run(scenario()) == [True, False, True]

    def test_sensor_unavailable(self, scripted_sensor):
        """Permanent sensor failure deactivates the sampler and reports once."""
        notified = []

        async def scenario():
            sampler = DetectionSampler(
                scripted_sensor([SensorUnavailableError("permission denied")]),
                on_detection=lambda p: None,
                period_seconds=60,
                on_unavailable=lambda: notified.append(True),
            )
            sampler.activate()
            result = sampler.sample_once()
            reactivated = sampler.activate()
            return sampler, result, reactivated

        sampler, result, reactivated = asyncio.run(scenario())
        assert result is None
        assert sampler.available is False
        assert sampler.active is False
        assert reactivated is False
        assert notified == [True]

    def test_rejects_non_positive_dwell(self, scripted_sensor):
        """Dwell window must be positive."""
        with pytest.raises(ValueError):
            DetectionSampler(scripted_sensor(), on_detection=lambda p: None, dwell_seconds=0)
