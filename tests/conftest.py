"""
Test Configuration
==================

Pytest fixtures and test configuration for the SmartAd console.
"""

from typing import Iterable, List, Optional, Sequence

import pytest

from smartad_console.catalog import Catalog, default_catalog
from smartad_console.models.ad import AdRecord, Gender, TargetGender
from smartad_console.models.detection import DetectedPerson, Position


class ScriptedRandom:
    """
    Deterministic RandomSource for tests.

    ``random()`` pops from ``values``; ``choice()`` pops an index from
    ``choices``. Both fall back to 0 when exhausted.
    """

    def __init__(self, values: Iterable[float] = (), choices: Iterable[int] = ()) -> None:
        self.values: List[float] = list(values)
        self.choices: List[int] = list(choices)
        self.choice_calls: int = 0

    def random(self) -> float:
        return self.values.pop(0) if self.values else 0.0

    def choice(self, seq: Sequence):
        self.choice_calls += 1
        index = self.choices.pop(0) if self.choices else 0
        return seq[index]


class ScriptedSensor:
    """SensorPolicy returning a fixed sequence of poll results."""

    def __init__(self, results: Iterable[Optional[DetectedPerson]] = (), frame_rate: float = 24.0) -> None:
        self.results = list(results)
        self.poll_count = 0
        self._frame_rate = frame_rate

    @property
    def frame_rate(self) -> float:
        return self._frame_rate

    def poll(self) -> Optional[DetectedPerson]:
        self.poll_count += 1
        if not self.results:
            return None
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def scripted_random():
    """Factory for ScriptedRandom sources."""
    return ScriptedRandom


@pytest.fixture
def scripted_sensor():
    """Factory for ScriptedSensor instances."""
    return ScriptedSensor


@pytest.fixture
def catalog() -> Catalog:
    """The built-in four-ad demo catalog."""
    return default_catalog()


@pytest.fixture
def scenario_catalog() -> Catalog:
    """One 25-45/female entry (15s) and one 50-70/both entry."""
    return Catalog([
        AdRecord(
            id="skincare",
            title="Premium Skincare Collection",
            age_range=(25, 45),
            target_gender=TargetGender.FEMALE,
            duration_seconds=15,
        ),
        AdRecord(
            id="retirement",
            title="Retirement Planning Guide",
            age_range=(50, 70),
            target_gender=TargetGender.BOTH,
            duration_seconds=20,
        ),
    ])


@pytest.fixture
def rotation_catalog() -> Catalog:
    """Three ads eligible for a 30-year-old of either gender, plus one that never is."""
    return Catalog([
        AdRecord(id="a", title="A", age_range=(20, 40), duration_seconds=2),
        AdRecord(id="kids", title="Kids", age_range=(5, 12), duration_seconds=5),
        AdRecord(id="b", title="B", age_range=(30, 30), duration_seconds=3),
        AdRecord(id="c", title="C", age_range=(0, 99), duration_seconds=4),
    ])


@pytest.fixture
def make_person():
    """Factory for DetectedPerson events."""
    counter = {"n": 0}

    def _make(age: int = 30, gender: str = "female", confidence: float = 0.9) -> DetectedPerson:
        counter["n"] += 1
        return DetectedPerson(
            id=f"person-{counter['n']}",
            age=age,
            gender=Gender(gender),
            confidence=confidence,
            position=Position(x=0.5, y=0.5),
        )

    return _make
