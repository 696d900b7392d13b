"""Wire-level data structures shared by the chat endpoint providers.

Hides the message and usage shapes the endpoints exchange, so the advisor
only ever sees ChatMessage in and text (plus optional token counts) out.
"""

from collections.abc import AsyncIterator, Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["system", "user", "assistant"]

USAGE_FIELDS = ("prompt_tokens", "completion_tokens", "total_tokens")


def normalize_usage(raw: Any) -> dict[str, int] | None:
    """Token counts from an SDK usage object or a decoded JSON mapping.

    Only the integer counters named in USAGE_FIELDS are kept; nested
    details and non-integer values are dropped.
    """
    if raw is None:
        return None
    if isinstance(raw, Mapping):
        values = {name: raw.get(name) for name in USAGE_FIELDS}
    else:
        values = {name: getattr(raw, name, None) for name in USAGE_FIELDS}
    usage = {
        name: value for name, value in values.items()
        if isinstance(value, int) and not isinstance(value, bool)
    }
    return usage or None


class ChatMessage(BaseModel):
    """One transcript entry as sent to the chat endpoint."""

    model_config = ConfigDict(frozen=True)

    role: Role = Field(description="Role of the message sender: 'system', 'user', or 'assistant'")
    content: str = Field(description="Content of the message")

    def to_wire(self) -> dict[str, str]:
        """The `{"role", "content"}` object both endpoints accept."""
        return {"role": self.role, "content": self.content}


class LLMResponse(BaseModel):
    """A complete reply from a chat endpoint."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Reply text")
    model: str = Field(description="Model that produced the reply")
    usage: dict[str, int] | None = Field(
        default=None,
        description="Token counts, when the endpoint reports them"
    )


class StreamingResponse:
    """Async iterator over reply chunks that also keeps the full text.

    Usage:
        stream = await provider.chat_completion_stream(messages)
        async for chunk in stream:
            preview(chunk)
        reply = stream.text
    """

    def __init__(self, chunks: AsyncIterator[str]):
        self._chunks = chunks
        self._received: list[str] = []
        self._usage: dict[str, int] | None = None

    @property
    def text(self) -> str:
        """Everything received so far, joined."""
        return "".join(self._received)

    @property
    def usage(self) -> dict[str, int] | None:
        """Token counts, set by the provider once the stream reports them."""
        return self._usage

    def set_usage(self, usage: dict[str, int] | None) -> None:
        self._usage = usage

    def __aiter__(self) -> "StreamingResponse":
        return self

    async def __anext__(self) -> str:
        chunk = await self._chunks.__anext__()
        self._received.append(chunk)
        return chunk
