"""Product catalog module.

Loads the static product document once and answers id and category queries.
"""

from .loader import DEFAULT_CATALOG_PATH, load_catalog, parse_catalog
from .models import Catalog, Product

__all__ = [
    "Catalog",
    "DEFAULT_CATALOG_PATH",
    "Product",
    "load_catalog",
    "parse_catalog",
]
