"""Catalog loading.

Hides where the catalog document lives and how it is validated.
"""

import json
from pathlib import Path

from pydantic import ValidationError

from ..errors import CatalogError
from .models import Catalog, Product

# Bundled catalog shipped with the package
DEFAULT_CATALOG_PATH = Path(__file__).parent / "products.json"


def parse_catalog(data: object) -> Catalog:
    """Build a Catalog from a decoded `{"products": [...]}` document.

    Raises:
        CatalogError: If the document shape is wrong, a product is invalid,
            or two products share an id
    """
    if not isinstance(data, dict) or "products" not in data:
        raise CatalogError("Catalog document must be an object with a 'products' list")

    raw_products = data["products"]
    if not isinstance(raw_products, list):
        raise CatalogError("'products' must be a list")

    products: list[Product] = []
    seen_ids: set[int] = set()
    for index, raw in enumerate(raw_products):
        try:
            product = Product.model_validate(raw)
        except ValidationError as e:
            raise CatalogError(f"Invalid product at index {index}: {e}") from e
        if product.id in seen_ids:
            raise CatalogError(f"Duplicate product id: {product.id}")
        seen_ids.add(product.id)
        products.append(product)

    return Catalog(products)


def load_catalog(path: str | Path | None = None) -> Catalog:
    """Load the catalog document from disk.

    Args:
        path: JSON file to read (None uses the bundled catalog)

    Returns:
        Loaded Catalog

    Raises:
        CatalogError: If the file is missing, not JSON, or malformed
    """
    catalog_path = Path(path) if path is not None else DEFAULT_CATALOG_PATH
    try:
        text = catalog_path.read_text(encoding="utf-8")
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {catalog_path}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog {catalog_path} is not valid JSON: {e}") from e

    return parse_catalog(data)
