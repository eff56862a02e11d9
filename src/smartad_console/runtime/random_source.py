"""
Random Source
=============

Injectable randomness for the fallback policy and the simulated sensor.

Anything with ``random()`` and ``choice()`` satisfies RandomSource, so a
plain ``random.Random`` works in production and tests can pass a scripted
sequence instead.
"""

import logging
import random
from typing import Optional, Protocol, Sequence, TypeVar


logger = logging.getLogger(__name__)

T = TypeVar("T")


class RandomSource(Protocol):
    """
    Protocol for random number sources.

    Implemented by:
        - random.Random (production)
        - scripted sources in tests
    """

    def random(self) -> float:
        """Return a float in [0, 1)."""
        ...

    def choice(self, seq: Sequence[T]) -> T:
        """Return one element of a non-empty sequence."""
        ...


def create_random_source(seed: Optional[int] = None) -> random.Random:
    """
    Create the process random source.

    Args:
        seed: Fixed seed for reproducible runs. None seeds from the OS.
    """
    if seed is not None:
        logger.info(f"Random source seeded with {seed}")
    return random.Random(seed)
