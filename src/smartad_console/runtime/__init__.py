"""
Runtime Module
==============

Event-loop plumbing shared by the console subsystems.

Components:
    - PeriodicTimer: Cancellable periodic callback on the asyncio loop
    - RandomSource: Protocol for injectable randomness
    - create_random_source: Seeded random.Random factory
"""

from smartad_console.runtime.random_source import RandomSource, create_random_source
from smartad_console.runtime.timers import PeriodicTimer


__all__ = [
    "PeriodicTimer",
    "RandomSource",
    "create_random_source",
]
