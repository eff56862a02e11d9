"""
Sensor Module
=============

Detection source abstraction and the periodic sampler.

This module treats person detection as a pluggable black box. The console
consumes only DetectedPerson events, never frames or model internals.

Components:
    - SensorPolicy: Protocol for detection sources
    - SimulatedSensor: Random demographic feed for demonstrations
    - SensorUnavailableError: Permanent sensor inactivity
    - DetectionSampler: Periodic polling and overlay expiry
"""

from smartad_console.sensor.engine import (
    SensorPolicy,
    SensorUnavailableError,
    SimulatedSensor,
)
from smartad_console.sensor.sampler import DetectionHandler, DetectionSampler

__all__ = [
    "SensorPolicy",
    "SensorUnavailableError",
    "SimulatedSensor",
    "DetectionHandler",
    "DetectionSampler",
]
