"""
Model Tests
===========

Validation of detection models and output views.
"""

import pytest

from smartad_console.models import OverlayView
from smartad_console.models.ad import Gender
from smartad_console.models.detection import DetectedPerson, DetectionLogEntry, Position, Target


class TestDetectionModels:
    """Tests for detection dataclasses."""

    def test_target_coerces_gender(self):
        """String genders are accepted and normalized."""
        target = Target(30, "female")
        assert target.gender is Gender.FEMALE
        assert str(target) == "30y female"

    @pytest.mark.parametrize("factory", [
        lambda: Target(-1, Gender.MALE),
        lambda: Target(30, "unknown"),
        lambda: Position(1.2, 0.5),
        lambda: DetectedPerson("p", 30, Gender.MALE, 1.5, Position(0.5, 0.5)),
        lambda: DetectionLogEntry(0.0, -3, Gender.MALE),
    ])
    def test_invalid_values(self, factory):
        """Out-of-range fields are rejected."""
        with pytest.raises(ValueError):
            factory()

    def test_person_target(self, make_person):
        """A detection exposes its targeting view."""
        person = make_person(age=41, gender="male")
        assert person.target == Target(41, Gender.MALE)

    def test_overlay_view(self, make_person):
        """Overlay view copies the fields drawn on the feed."""
        person = make_person(age=22, gender="female", confidence=0.87)
        view = OverlayView.from_detection(person)
        assert view.id == person.id
        assert view.age == 22
        assert view.gender == Gender.FEMALE
        assert view.confidence == pytest.approx(0.87)
        assert (view.x, view.y) == (0.5, 0.5)
