"""Selection store.

Owns the set of selected product ids. Every mutation persists the full id
set to the key-value store and then notifies subscribers, which is how the
pill list and card highlighting stay in sync.
"""

import json
from collections.abc import Callable

from ..catalog import Catalog, Product
from ..errors import UnknownProductError
from ..storage import KeyValueStore

SELECTION_KEY = "selectedProductIds"

SelectionListener = Callable[["SelectionStore"], None]


def _decode_ids(raw: str | None) -> set[int]:
    """Decode a persisted JSON id array. Anything malformed restores as empty."""
    if not raw:
        return set()
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return set()
    if not isinstance(data, list):
        return set()
    # bool is an int subclass; a stray `true` is not a product id
    return {item for item in data if isinstance(item, int) and not isinstance(item, bool)}


class SelectionStore:
    """Persisted set of selected product ids.

    Example:
        selection = SelectionStore(store, catalog)
        unsubscribe = selection.subscribe(lambda s: print(s.ids()))
        selection.add(2)
        selection.toggle(5)
    """

    def __init__(self, store: KeyValueStore, catalog: Catalog) -> None:
        self._store = store
        self._catalog = catalog
        self._ids: set[int] = _decode_ids(store.get(SELECTION_KEY))
        self._listeners: list[SelectionListener] = []

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    def subscribe(self, listener: SelectionListener) -> Callable[[], None]:
        """Register a callback run after every effective mutation.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _commit(self) -> None:
        """Persist the full id set, then notify listeners."""
        self._store.set(SELECTION_KEY, json.dumps(sorted(self._ids)))
        for listener in list(self._listeners):
            listener(self)

    def add(self, product_id: int) -> None:
        """Select a product.

        Raises:
            UnknownProductError: If the id is not in the loaded catalog
        """
        if product_id not in self._catalog:
            raise UnknownProductError(product_id)
        if product_id in self._ids:
            return
        self._ids.add(product_id)
        self._commit()

    def remove(self, product_id: int) -> None:
        """Deselect a product. Removing an absent id is a no-op."""
        if product_id not in self._ids:
            return
        self._ids.discard(product_id)
        self._commit()

    def toggle(self, product_id: int) -> bool:
        """Flip membership of a product. Returns True if it is now selected."""
        if product_id in self._ids:
            self.remove(product_id)
            return False
        self.add(product_id)
        return True

    def clear(self) -> None:
        """Deselect everything. Clearing an empty selection is a no-op."""
        if not self._ids:
            return
        self._ids.clear()
        self._commit()

    def contains(self, product_id: int) -> bool:
        return product_id in self._ids

    def __contains__(self, product_id: object) -> bool:
        return product_id in self._ids

    def ids(self) -> frozenset[int]:
        """Raw selected ids, including any stale ids not in the catalog."""
        return frozenset(self._ids)

    def list(self) -> list[Product]:
        """Selected products in catalog order. Stale ids are filtered out."""
        return [p for p in self._catalog if p.id in self._ids]

    def __len__(self) -> int:
        return len(self.list())

    def __bool__(self) -> bool:
        return bool(self.list())
