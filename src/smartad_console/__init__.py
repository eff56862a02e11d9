"""
SmartAd Console
===============

Demographic ad targeting and rotation driven by a simulated detection feed.

This package pairs a person-detection event source with a rule-based
advertisement targeting/rotation engine and a rolling analytics log.

Components:
    - catalog: Read-only advertisement catalog
    - targeting: Eligibility filter and rotation state machine
    - sensor: Detection source abstraction and periodic sampler
    - observability: Bounded detection log and dashboard statistics
    - runtime: Periodic timers and injectable randomness
    - console: Session object composing the above

Example:
    from smartad_console.config import settings
    from smartad_console.console import SmartAdConsole

    # The console is started via the FastAPI application
    # See main.py for entry point
"""

__version__ = "0.1.0"
__author__ = "SmartAd Project"

__all__ = [
    "__version__",
]
