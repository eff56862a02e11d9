"""
Catalog Loading
===============

Read-only advertisement catalog and its YAML loader.

Catalog File Format:
    ads:
      - id: "1"
        title: Premium Skincare Collection
        age_range: 25-45          # or [25, 45]
        target_gender: female     # male | female | both
        category: Beauty
        media_ref: /assets/skincare.jpg
        duration_seconds: 15

Rules:
    - Ids are unique
    - A catalog is never empty (the fallback policy needs one entry)
    - Catalog order is preserved; it defines eligible-set order
"""

import logging
from pathlib import Path
from typing import Iterable, Iterator, Optional, Tuple, Union

import yaml
from pydantic import ValidationError

from smartad_console.catalog.defaults import DEFAULT_ADS
from smartad_console.models.ad import AdRecord


logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when a catalog is empty, has duplicate ids, or cannot be parsed."""


class Catalog:
    """
    Immutable, ordered collection of AdRecords.

    Example:
        catalog = Catalog(DEFAULT_ADS)
        ad = catalog.get("3")
        for ad in catalog:
            ...
    """

    def __init__(self, ads: Iterable[AdRecord]) -> None:
        records: Tuple[AdRecord, ...] = tuple(ads)
        if not records:
            raise CatalogError("catalog must contain at least one ad")

        seen = set()
        for ad in records:
            if ad.id in seen:
                raise CatalogError(f"duplicate ad id in catalog: {ad.id!r}")
            seen.add(ad.id)

        self._ads = records
        self._by_id = {ad.id: ad for ad in records}

    @property
    def ads(self) -> Tuple[AdRecord, ...]:
        return self._ads

    def get(self, ad_id: str) -> Optional[AdRecord]:
        return self._by_id.get(ad_id)

    def __iter__(self) -> Iterator[AdRecord]:
        return iter(self._ads)

    def __len__(self) -> int:
        return len(self._ads)

    def __getitem__(self, index: int) -> AdRecord:
        return self._ads[index]

    def __contains__(self, ad_id: object) -> bool:
        return ad_id in self._by_id

    def __repr__(self) -> str:
        return f"Catalog({len(self._ads)} ads: {', '.join(self._by_id)})"


def default_catalog() -> Catalog:
    """Built-in four-ad demonstration catalog."""
    return Catalog(DEFAULT_ADS)


def load_catalog(path: Optional[Union[str, Path]] = None) -> Catalog:
    """
    Load a catalog from a YAML file.

    Args:
        path: Catalog file. If None, the built-in catalog is returned.

    Returns:
        Catalog: Loaded catalog

    Raises:
        CatalogError: If the file is missing, malformed, or invalid
    """
    if path is None:
        logger.info("Using built-in catalog")
        return default_catalog()

    catalog_path = Path(path)
    if not catalog_path.exists():
        raise CatalogError(f"catalog file not found: {catalog_path}")

    with open(catalog_path, "r") as f:
        data = yaml.safe_load(f) or {}

    entries = data.get("ads") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise CatalogError(f"{catalog_path}: expected a list of ads under 'ads'")

    try:
        ads = [AdRecord.model_validate(entry) for entry in entries]
    except ValidationError as e:
        raise CatalogError(f"{catalog_path}: invalid ad record: {e}") from e

    catalog = Catalog(ads)
    logger.info(f"Loaded catalog from {catalog_path}: {len(catalog)} ads")
    return catalog
