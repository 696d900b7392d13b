"""Tests for the persisted product selection."""
import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from routine_advisor.catalog import Catalog, Product
from routine_advisor.errors import UnknownProductError
from routine_advisor.selection import SELECTION_KEY, SelectionStore
from routine_advisor.storage import InMemoryStore, JSONFileStore


class TestSelectionMutations:
    """Add, remove, toggle, clear."""

    def test_add_and_list_in_catalog_order(self, selection):
        selection.add(5)
        selection.add(2)
        assert [p.id for p in selection.list()] == [2, 5]
        assert 5 in selection
        assert selection.contains(2)

    def test_add_is_idempotent(self, selection, store):
        calls = []
        selection.subscribe(lambda s: calls.append(s.ids()))
        selection.add(3)
        selection.add(3)
        assert selection.ids() == frozenset({3})
        assert len(calls) == 1

    def test_add_unknown_id_raises(self, selection, store):
        with pytest.raises(UnknownProductError) as exc_info:
            selection.add(999)
        assert exc_info.value.product_id == 999
        assert store.get(SELECTION_KEY) is None

    def test_remove_absent_is_noop(self, selection):
        calls = []
        selection.subscribe(lambda s: calls.append(1))
        selection.remove(4)
        assert calls == []

    def test_toggle(self, selection):
        assert selection.toggle(1) is True
        assert selection.toggle(1) is False
        assert not selection

    def test_clear(self, selection, store):
        selection.add(1)
        selection.add(6)
        selection.clear()
        assert selection.list() == []
        assert json.loads(store.get(SELECTION_KEY)) == []

    def test_clear_empty_is_noop(self, selection):
        calls = []
        selection.subscribe(lambda s: calls.append(1))
        selection.clear()
        assert calls == []


class TestSelectionPersistence:
    """Every mutation writes the full id set."""

    def test_persisted_after_each_mutation(self, selection, store):
        selection.add(5)
        assert json.loads(store.get(SELECTION_KEY)) == [5]
        selection.add(2)
        assert json.loads(store.get(SELECTION_KEY)) == [2, 5]
        selection.remove(5)
        assert json.loads(store.get(SELECTION_KEY)) == [2]

    def test_restore_from_persisted_ids(self, catalog):
        store = InMemoryStore({SELECTION_KEY: "[2, 5]"})
        selection = SelectionStore(store, catalog)
        assert [p.name for p in selection.list()] == ["Foaming Cleanser", "Niacinamide 10%"]

    def test_restore_across_file_reopen(self, tmp_path, catalog):
        path = tmp_path / "state.json"
        SelectionStore(JSONFileStore(path), catalog).add(4)
        restored = SelectionStore(JSONFileStore(path), catalog)
        assert restored.ids() == frozenset({4})

    @pytest.mark.parametrize("raw", ["not json", "{\"a\": 1}", "\"2\"", "[true, \"x\", 1.5]"])
    def test_malformed_persisted_value_restores_empty(self, catalog, raw):
        selection = SelectionStore(InMemoryStore({SELECTION_KEY: raw}), catalog)
        assert selection.ids() == frozenset()

    def test_stale_ids_are_hidden_from_list(self, catalog):
        store = InMemoryStore({SELECTION_KEY: "[1, 42]"})
        selection = SelectionStore(store, catalog)
        assert selection.ids() == frozenset({1, 42})
        assert [p.id for p in selection.list()] == [1]
        assert len(selection) == 1


class TestSelectionListeners:
    def test_listener_sees_committed_state(self, selection, store):
        seen = []
        selection.subscribe(lambda s: seen.append(store.get(SELECTION_KEY)))
        selection.add(3)
        assert seen == ["[3]"]

    def test_unsubscribe(self, selection):
        calls = []
        unsubscribe = selection.subscribe(lambda s: calls.append(1))
        unsubscribe()
        unsubscribe()
        selection.add(1)
        assert calls == []


@given(st.lists(st.tuples(st.booleans(), st.integers(min_value=1, max_value=6)), max_size=30))
def test_selection_matches_model_set(operations):
    """Property test: the store behaves like a plain set and restores identically."""
    catalog = Catalog([
        Product(id=i, brand="b", name=f"p{i}", category="skincare") for i in range(1, 7)
    ])
    store = InMemoryStore()
    selection = SelectionStore(store, catalog)
    model: set[int] = set()

    for is_add, product_id in operations:
        if is_add:
            selection.add(product_id)
            model.add(product_id)
        else:
            selection.remove(product_id)
            model.discard(product_id)

    assert selection.ids() == frozenset(model)
    assert SelectionStore(store, catalog).ids() == frozenset(model)
