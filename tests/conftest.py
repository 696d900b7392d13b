"""Pytest configuration and shared fixtures."""
import json
import os
from pathlib import Path
from typing import Any

import pytest

from routine_advisor.catalog import Catalog, parse_catalog
from routine_advisor.errors import EndpointError
from routine_advisor.llm import ChatMessage, LLMProvider, LLMResponse, StreamingResponse
from routine_advisor.selection import SelectionStore
from routine_advisor.storage import InMemoryStore

SAMPLE_PRODUCTS = [
    {"id": 1, "brand": "CeraVe", "name": "Hydrating Cleanser", "category": "cleanser",
     "description": "Gentle, non-foaming.", "image": "https://img.example.com/1.jpg"},
    {"id": 2, "brand": "La Roche-Posay", "name": "Foaming Cleanser", "category": "cleanser",
     "description": "For oily skin.", "image": "https://img.example.com/2.jpg"},
    {"id": 3, "brand": "CeraVe", "name": "Daily Lotion", "category": "moisturizer",
     "description": "Lightweight hydration.", "image": "https://img.example.com/3.jpg"},
    {"id": 4, "brand": "Olaplex", "name": "No. 3", "category": "haircare",
     "description": "Weekly bond treatment.", "image": "https://img.example.com/4.jpg"},
    {"id": 5, "brand": "The Ordinary", "name": "Niacinamide 10%", "category": "skincare",
     "description": "<b>Serum</b> [bold]with[/bold] zinc.", "image": "https://img.example.com/5.jpg"},
    {"id": 6, "brand": "Kiehl's", "name": "Ultra Facial Cream", "category": "moisturizer",
     "description": "24-hour moisture.", "image": "https://img.example.com/6.jpg"},
]


class FakeLLM(LLMProvider):
    """Scripted chat endpoint that records every request.

    Each entry in `replies` is either a reply string or an exception to raise.
    """

    def __init__(self, replies: list[Any] | None = None, model: str = "fake-model"):
        self._replies = list(replies or [])
        self._model = model
        self.calls: list[list[ChatMessage]] = []
        self.closed = False

    @property
    def model(self) -> str:
        return self._model

    def _next(self) -> str:
        if not self._replies:
            return "A routine."
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def chat_completion(self, messages, model=None, **kwargs) -> LLMResponse:
        self.calls.append(list(messages))
        return LLMResponse(content=self._next(), model=model or self._model)

    async def chat_completion_stream(self, messages, model=None, **kwargs) -> StreamingResponse:
        self.calls.append(list(messages))

        async def _chunks():
            reply = self._next()
            for i in range(0, len(reply), 4):
                yield reply[i:i + 4]

        return StreamingResponse(_chunks())

    async def close(self) -> None:
        self.closed = True


@pytest.fixture(scope="session")
def api_keys():
    """Return API keys from environment."""
    return {
        "openai": os.getenv("OPENAI_API_KEY"),
        "worker_url": os.getenv("ADVISOR_WORKER_URL"),
    }


@pytest.fixture
def catalog_data() -> dict:
    return {"products": [dict(p) for p in SAMPLE_PRODUCTS]}


@pytest.fixture
def catalog(catalog_data) -> Catalog:
    return parse_catalog(catalog_data)


@pytest.fixture
def catalog_file(tmp_path, catalog_data) -> Path:
    path = tmp_path / "products.json"
    path.write_text(json.dumps(catalog_data))
    return path


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def selection(store, catalog) -> SelectionStore:
    return SelectionStore(store, catalog)


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def failing_llm() -> FakeLLM:
    return FakeLLM([EndpointError("Endpoint returned HTTP 500", status_code=500)])


@pytest.fixture
def llm_factory():
    """Build a FakeLLM with scripted replies."""
    return FakeLLM
