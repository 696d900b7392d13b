from collections.abc import AsyncIterator
from typing import Any

import openai
from openai import AsyncOpenAI

from ...errors import EndpointError, MalformedResponseError
from ..base import DEFAULT_MODEL, LLMProvider
from ..models import ChatMessage, LLMResponse, StreamingResponse, normalize_usage


def _endpoint_error(e: openai.APIError) -> EndpointError:
    status = getattr(e, "status_code", None)
    return EndpointError(f"OpenAI request failed: {e}", status_code=status)


class OpenAIProvider(LLMProvider):
    """Direct OpenAI Chat Completions access.

    Hidden design decisions:
    - OpenAI API client initialization and authentication
    - Message format conversion
    - Mapping SDK exceptions onto EndpointError
    """

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        base_url: str | None = None,
        organization: str | None = None,
        **client_kwargs: Any
    ):
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key
            model: Default model to use
            base_url: Optional custom API base URL
            organization: Optional organization ID
            **client_kwargs: Additional kwargs for AsyncOpenAI client
        """
        self._model = model
        # The SDK retries by default; a user action is a single best-effort request
        client_kwargs.setdefault("max_retries", 0)
        self._client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            organization=organization,
            **client_kwargs
        )
        self._current_stream_response: StreamingResponse | None = None

    @property
    def model(self) -> str:
        return self._model

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Generate a chat completion using OpenAI."""
        request_params: dict[str, Any] = {
            "model": model or self._model,
            "messages": [msg.to_wire() for msg in messages],
            **kwargs
        }

        try:
            completion = await self._client.chat.completions.create(**request_params)
        except openai.APIError as e:
            raise _endpoint_error(e) from e

        if not completion.choices or not completion.choices[0].message.content:
            raise MalformedResponseError("No content in AI response.")

        return LLMResponse(
            content=completion.choices[0].message.content,
            model=completion.model,
            usage=normalize_usage(completion.usage)
        )

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """Generate a streaming chat completion using OpenAI."""
        response = StreamingResponse(self._chat_stream_generator(
            model or self._model, [msg.to_wire() for msg in messages], **kwargs
        ))
        self._current_stream_response = response
        return response

    async def _chat_stream_generator(
        self,
        model: str,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> AsyncIterator[str]:
        """Internal generator for Chat Completions streaming with usage capture."""
        request_params: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "stream": True,
            "stream_options": {"include_usage": True},
            **kwargs,
        }

        try:
            stream = await self._client.chat.completions.create(**request_params)
            async for chunk in stream:
                if chunk.usage is not None and self._current_stream_response is not None:
                    self._current_stream_response.set_usage(normalize_usage(chunk.usage))
                if chunk.choices and chunk.choices[0].delta.content:
                    yield chunk.choices[0].delta.content
        except openai.APIError as e:
            raise _endpoint_error(e) from e

    async def close(self) -> None:
        """Close the OpenAI client."""
        await self._client.close()
