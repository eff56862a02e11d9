"""
Catalog Module
==============

Static, read-only advertisement catalog.

Components:
    - Catalog: Ordered, immutable collection of AdRecords
    - load_catalog: YAML loader (built-in catalog when no path is given)
    - DEFAULT_ADS: The four demonstration ads
"""

from smartad_console.catalog.defaults import DEFAULT_ADS
from smartad_console.catalog.loader import (
    Catalog,
    CatalogError,
    default_catalog,
    load_catalog,
)


__all__ = [
    "DEFAULT_ADS",
    "Catalog",
    "CatalogError",
    "default_catalog",
    "load_catalog",
]
