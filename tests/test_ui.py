"""Pilot tests for the Textual app."""
import asyncio

import pytest
from textual.widgets import Button, Select

from routine_advisor.selection import SELECTION_KEY
from routine_advisor.storage import THEME_KEY, InMemoryStore
from routine_advisor.ui import RoutineAdvisorApp
from routine_advisor.ui.widgets import ChatHistoryWidget, ProductCard, ProductGrid, SelectedProducts

SIZE = (160, 50)


def _app(catalog, store, llm, **kwargs) -> RoutineAdvisorApp:
    return RoutineAdvisorApp(catalog=catalog, store=store, llm=llm, **kwargs)


@pytest.mark.asyncio
async def test_restored_selection_renders_pills(catalog, fake_llm):
    store = InMemoryStore({SELECTION_KEY: "[2, 5]"})
    app = _app(catalog, store, fake_llm)
    async with app.run_test(size=SIZE) as pilot:
        await pilot.pause()
        assert app.query_one(SelectedProducts).keys() == ["pill-2", "pill-5"]
        assert not app.query(ProductCard)


@pytest.mark.asyncio
async def test_category_filter_and_card_toggle(catalog, store, fake_llm):
    app = _app(catalog, store, fake_llm)
    async with app.run_test(size=SIZE) as pilot:
        app.query_one("#category-filter", Select).value = "cleanser"
        await pilot.pause()
        await pilot.pause()
        cards = list(app.query(ProductCard))
        assert [card.product_id for card in cards] == [1, 2]

        cards[1].action_toggle_selection()
        await pilot.pause()
        await pilot.pause()

        assert app.selection.ids() == frozenset({2})
        assert app.query_one(ProductGrid).card(2).has_class("selected")
        assert app.query_one(SelectedProducts).keys() == ["pill-2"]

        app.action_clear_selection()
        await pilot.pause()
        await pilot.pause()
        assert not app.query_one(ProductGrid).card(2).has_class("selected")
        assert app.query_one(SelectedProducts).keys() == []


@pytest.mark.asyncio
async def test_generate_routine_adds_bubbles(catalog, store, llm_factory):
    llm = llm_factory(["**Morning**: cleanse."])
    app = _app(catalog, store, llm)
    async with app.run_test(size=SIZE) as pilot:
        app.selection.add(1)
        await pilot.pause()
        app.action_generate_routine()
        await app.workers.wait_for_complete()
        await pilot.pause()

        chat = app.query_one(ChatHistoryWidget)
        assert [b.role for b in chat.bubbles] == ["user", "assistant"]
        assert chat.get_last_response() == "**Morning**: cleanse."
        assert app.advisor.routine_generated


@pytest.mark.asyncio
async def test_theme_toggle_is_persisted(catalog, store, fake_llm):
    app = _app(catalog, store, fake_llm)
    async with app.run_test(size=SIZE) as pilot:
        assert app.theme == "advisor-dark"
        app.action_toggle_theme()
        await pilot.pause()
        assert app.theme == "advisor-light"
    assert store.get(THEME_KEY) == "light"


@pytest.mark.asyncio
async def test_pill_remove_clears_card_highlight(catalog, store, fake_llm):
    app = _app(catalog, store, fake_llm)
    async with app.run_test(size=SIZE) as pilot:
        app.query_one("#category-filter", Select).value = "cleanser"
        await pilot.pause()
        await pilot.pause()
        app.query_one(ProductGrid).card(2).action_toggle_selection()
        await pilot.pause()
        await pilot.pause()
        assert app.query_one(ProductGrid).card(2).has_class("selected")

        app.query_one("#pill-2 .remove-pill", Button).press()
        await pilot.pause()
        await pilot.pause()

        assert not app.query_one(ProductGrid).card(2).has_class("selected")
        assert app.query_one(SelectedProducts).keys() == []
        assert store.get(SELECTION_KEY) == "[]"


@pytest.mark.asyncio
async def test_controls_stay_locked_while_request_pending(catalog, store, llm_factory):
    release = asyncio.Event()

    class SlowLLM(llm_factory):
        async def chat_completion(self, messages, model=None, **kwargs):
            await release.wait()
            return await super().chat_completion(messages, model=model, **kwargs)

    llm = SlowLLM(["Routine."])
    app = _app(catalog, store, llm)
    async with app.run_test(size=SIZE) as pilot:
        app.selection.add(1)
        await pilot.pause()

        app.action_generate_routine()
        app.action_generate_routine()
        await pilot.pause()
        await pilot.pause()

        assert app.query_one("#generate-btn", Button).disabled
        assert app.query_one("#send-btn", Button).disabled

        release.set()
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert len(llm.calls) == 1
        assert not app.query_one("#generate-btn", Button).disabled
        assert not app.query_one("#send-btn", Button).disabled
