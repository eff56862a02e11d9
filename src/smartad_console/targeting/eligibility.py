"""
Eligibility Filter
==================

Maps a target demographic to the catalog entries that may be shown to it.

Matching Rule:
    target.age in [ad.min_age, ad.max_age]
    AND (ad.target_gender == BOTH OR ad.target_gender == target.gender)

An empty result is a normal outcome; the scheduler's fallback policy
handles it.
"""

from typing import Iterable, Tuple

from smartad_console.models.ad import AdRecord
from smartad_console.models.detection import Target


def select_eligible(target: Target, catalog: Iterable[AdRecord]) -> Tuple[AdRecord, ...]:
    """
    Select every catalog entry matching the target, in catalog order.

    Args:
        target: Demographic to match
        catalog: Catalog (or any iterable of AdRecords)

    Returns:
        Matching records, possibly empty
    """
    return tuple(ad for ad in catalog if ad.matches(target.age, target.gender))
