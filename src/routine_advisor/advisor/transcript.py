"""Append-only chat transcript."""

from collections.abc import Iterator

from ..llm import ChatMessage
from ..prompts import get_system_prompt


class Transcript:
    """Ordered message history sent to the chat endpoint.

    Always starts with a single system message. Messages are only ever
    appended; `reset` starts a fresh transcript with the same system message.
    """

    def __init__(self, system_prompt: str | None = None) -> None:
        self._system = ChatMessage(
            role="system",
            content=system_prompt if system_prompt is not None else get_system_prompt(),
        )
        self._messages: list[ChatMessage] = [self._system]

    @property
    def system_message(self) -> ChatMessage:
        return self._system

    @property
    def messages(self) -> list[ChatMessage]:
        """A copy of the full transcript."""
        return list(self._messages)

    def append(self, role: str, content: str) -> ChatMessage:
        if role == "system":
            raise ValueError("The transcript has exactly one system message")
        message = ChatMessage(role=role, content=content)
        self._messages.append(message)
        return message

    def for_request(self, limit: int | None = None) -> list[ChatMessage]:
        """Messages to send with the next request.

        Args:
            limit: Keep only the most recent `limit` non-system messages.
                None sends everything.
        """
        if limit is None:
            return self.messages
        history = self._messages[1:]
        return [self._system, *history[-limit:]] if limit > 0 else [self._system]

    def reset(self) -> None:
        self._messages = [self._system]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(list(self._messages))
