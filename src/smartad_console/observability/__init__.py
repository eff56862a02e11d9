"""
Observability Module
====================

Analytics for the SmartAd console dashboard.

This module provides:
    - AnalyticsAggregator: Bounded detection log plus rolling statistics

DESIGN RULES:
    - Does NOT import targeting logic
    - Does NOT influence ad selection
"""

from smartad_console.observability.analytics import (
    ADULT_UPPER_AGE,
    YOUNG_UPPER_AGE,
    AnalyticsAggregator,
)


__all__ = [
    "AnalyticsAggregator",
    "YOUNG_UPPER_AGE",
    "ADULT_UPPER_AGE",
]
