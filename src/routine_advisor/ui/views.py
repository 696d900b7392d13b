"""View state for the catalog grid and the selected-products list.

Hides how visible cards and pills are derived from the catalog and the
selection. Widgets reconcile against these states by product id; nothing
here touches Textual.
"""

from dataclasses import dataclass

from ..catalog import Catalog, Product
from ..selection import SelectionStore
from .config import PILL_ID_PREFIX, PRODUCT_ID_PREFIX


@dataclass(frozen=True)
class CardState:
    """Render state of one product card."""

    product: Product
    selected: bool
    expanded: bool

    @property
    def key(self) -> str:
        return f"{PRODUCT_ID_PREFIX}{self.product.id}"


@dataclass(frozen=True)
class PillState:
    """Render state of one selected-product pill."""

    product_id: int
    label: str

    @property
    def key(self) -> str:
        return f"{PILL_ID_PREFIX}{self.product_id}"


class CatalogView:
    """Which products are visible and which cards have details expanded.

    Selection highlighting is derived from the SelectionStore on every call
    to `cards`; it is never stored here. Expanded flags are per card, local
    to the current category, and never persisted.
    """

    def __init__(self, catalog: Catalog, selection: SelectionStore) -> None:
        self._catalog = catalog
        self._selection = selection
        self._category: str | None = None
        self._visible: list[Product] = []
        self._expanded: set[int] = set()

    @property
    def category(self) -> str | None:
        return self._category

    @property
    def has_category(self) -> bool:
        return self._category is not None

    def show_category(self, category: str | None) -> list[Product]:
        """Switch the visible subset. Expanded flags reset."""
        self._category = category
        self._visible = self._catalog.filter_by_category(category) if category else []
        self._expanded.clear()
        return list(self._visible)

    def is_visible(self, product_id: int) -> bool:
        return any(p.id == product_id for p in self._visible)

    def toggle_details(self, product_id: int) -> bool:
        """Flip a card's details flag. Returns True if now expanded."""
        if product_id in self._expanded:
            self._expanded.discard(product_id)
            return False
        self._expanded.add(product_id)
        return True

    def is_expanded(self, product_id: int) -> bool:
        return product_id in self._expanded

    def cards(self) -> list[CardState]:
        """Card states for the visible products, in catalog order."""
        return [
            CardState(
                product=p,
                selected=self._selection.contains(p.id),
                expanded=p.id in self._expanded,
            )
            for p in self._visible
        ]


def pills(selection: SelectionStore) -> list[PillState]:
    """Pill states for the selected products. Stale ids are skipped."""
    return [PillState(product_id=p.id, label=p.label) for p in selection.list()]
