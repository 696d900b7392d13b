"""Data models for the product catalog.

Hides the internal representation of products and the catalog lookup.
"""

from collections.abc import Iterator, Sequence

from pydantic import BaseModel, ConfigDict, Field


class Product(BaseModel):
    """A single catalog product. Immutable once loaded."""

    model_config = ConfigDict(frozen=True)

    id: int = Field(description="Unique product identifier")
    brand: str = Field(description="Brand name")
    name: str = Field(description="Product name")
    category: str = Field(description="Category used for filtering (e.g. 'cleanser')")
    description: str = Field(default="", description="Long-form product description")
    image: str = Field(default="", description="Image URL")

    @property
    def label(self) -> str:
        """Short display label used by pills and tables."""
        return f"{self.brand} - {self.name}"

    def minimal(self) -> dict[str, object]:
        """Fields sent to the chat model when building a routine."""
        return self.model_dump(include={"id", "brand", "name", "category", "description"})


class Catalog:
    """Ordered, read-only collection of products with id lookup."""

    def __init__(self, products: Sequence[Product]) -> None:
        self._products = tuple(products)
        self._by_id = {p.id: p for p in self._products}

    @property
    def products(self) -> tuple[Product, ...]:
        """All products in catalog order."""
        return self._products

    def get(self, product_id: int) -> Product | None:
        """Look up a product by id. Returns None for unknown ids."""
        return self._by_id.get(product_id)

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._by_id

    def __len__(self) -> int:
        return len(self._products)

    def __iter__(self) -> Iterator[Product]:
        return iter(self._products)

    def categories(self) -> list[str]:
        """Unique categories in first-seen order."""
        seen: dict[str, None] = {}
        for product in self._products:
            seen.setdefault(product.category, None)
        return list(seen)

    def filter_by_category(self, category: str) -> list[Product]:
        """Products whose category equals `category`, in catalog order."""
        return [p for p in self._products if p.category == category]
