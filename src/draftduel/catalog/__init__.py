"""Player reference data used to validate picks and choose teams."""

from .players import DEFAULT_CATALOG_MAPPING, PlayerCatalog, load_catalog_csv

__all__ = [
    "DEFAULT_CATALOG_MAPPING",
    "PlayerCatalog",
    "load_catalog_csv",
]
