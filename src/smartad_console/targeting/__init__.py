"""
Targeting Module
================

Rule-based ad targeting and rotation.

This module implements the core selection logic:
    - eligibility.py: Pure demographic filter over the catalog
    - scheduler.py: Rotation state machine (IDLE / PLAYING / PAUSED)

Key Design Decisions:
    - All scheduler mutation goes through handle_event()
    - An empty eligible set falls back to a random catalog ad
    - Randomness is injected, never global
"""

from smartad_console.targeting.eligibility import select_eligible
from smartad_console.targeting.scheduler import AdShownListener, RotationScheduler

__all__ = [
    "select_eligible",
    "RotationScheduler",
    "AdShownListener",
]
