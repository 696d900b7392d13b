"""Proxy endpoint provider.

Talks to an OpenAI-compatible proxy (for example a Cloudflare Worker that
holds the real API key) at an arbitrary URL. The proxy accepts
`{"model": ..., "messages": [...]}` and returns
`{"choices": [{"message": {"content": ...}}]}`.
"""

from collections.abc import AsyncIterator
from typing import Any

import httpx

from ...errors import EndpointError, MalformedResponseError
from ..base import DEFAULT_MODEL, LLMProvider
from ..models import ChatMessage, LLMResponse, StreamingResponse, normalize_usage


def extract_reply(data: Any) -> str:
    """Pull `choices[0].message.content` out of a decoded response body.

    Raises:
        MalformedResponseError: If any level of the path is missing or the
            content is not a non-empty string
    """
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError("No content in AI response.") from e
    if not isinstance(content, str) or not content:
        raise MalformedResponseError("No content in AI response.")
    return content


class WorkerProvider(LLMProvider):
    """Chat endpoint reached through a plain JSON POST.

    Hidden design decisions:
    - HTTP client and connection reuse
    - Request body shape
    - Validation of the response shape
    """

    def __init__(
        self,
        url: str,
        model: str = DEFAULT_MODEL,
        headers: dict[str, str] | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the worker provider.

        Args:
            url: Full endpoint URL to POST to
            model: Model name sent in the request body
            headers: Extra request headers
            timeout: Request timeout in seconds (None waits indefinitely)
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._url = url
        self._model = model
        self._client = httpx.AsyncClient(
            headers={"Content-Type": "application/json", **(headers or {})},
            timeout=timeout,
            transport=transport,
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def url(self) -> str:
        return self._url

    async def chat_completion(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """POST the transcript and validate the reply."""
        model_to_use = model or self._model
        body = {
            "model": model_to_use,
            "messages": [msg.to_wire() for msg in messages],
            **kwargs,
        }

        try:
            response = await self._client.post(self._url, json=body)
        except httpx.HTTPError as e:
            raise EndpointError(f"Request to {self._url} failed: {e}") from e

        if not response.is_success:
            raise EndpointError(
                f"Endpoint returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise MalformedResponseError("Endpoint response is not JSON") from e

        content = extract_reply(data)
        return LLMResponse(
            content=content,
            model=str(data.get("model") or model_to_use),
            usage=normalize_usage(data.get("usage")),
        )

    async def chat_completion_stream(
        self,
        messages: list[ChatMessage],
        model: str | None = None,
        **kwargs: Any
    ) -> StreamingResponse:
        """The proxy replies in one piece, so the stream has a single chunk."""
        response = StreamingResponse(self._single_chunk(messages, model, **kwargs))
        return response

    async def _single_chunk(
        self,
        messages: list[ChatMessage],
        model: str | None,
        **kwargs: Any
    ) -> AsyncIterator[str]:
        result = await self.chat_completion(messages, model=model, **kwargs)
        yield result.content

    async def close(self) -> None:
        await self._client.aclose()
