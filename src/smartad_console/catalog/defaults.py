"""
Default Catalog
===============

Built-in demonstration catalog used when no catalog file is configured.
"""

from smartad_console.models.ad import AdRecord, TargetGender


DEFAULT_ADS = (
    AdRecord(
        id="1",
        title="Premium Skincare Collection",
        description="Discover our anti-aging skincare line for radiant, youthful skin",
        age_range=(25, 45),
        target_gender=TargetGender.FEMALE,
        category="Beauty",
        media_ref="/api/placeholder/400/300",
        duration_seconds=15,
    ),
    AdRecord(
        id="2",
        title="Gaming Laptop Pro",
        description="Ultimate performance for gaming and content creation",
        age_range=(18, 35),
        target_gender=TargetGender.MALE,
        category="Technology",
        media_ref="/api/placeholder/400/300",
        duration_seconds=10,
    ),
    AdRecord(
        id="3",
        title="Retirement Planning Guide",
        description="Secure your financial future with our expert retirement solutions",
        age_range=(50, 70),
        target_gender=TargetGender.BOTH,
        category="Finance",
        media_ref="/api/placeholder/400/300",
        duration_seconds=20,
    ),
    AdRecord(
        id="4",
        title="Fitness Tracker Pro",
        description="Monitor your health and achieve your fitness goals",
        age_range=(20, 40),
        target_gender=TargetGender.BOTH,
        category="Health",
        media_ref="/api/placeholder/400/300",
        duration_seconds=12,
    ),
)
