from .base import DEFAULT_MODEL, LLMProvider
from .factory import create_llm_provider
from .models import ChatMessage, LLMResponse, StreamingResponse
from .providers import OpenAIProvider, WorkerProvider

__all__ = [
    "DEFAULT_MODEL",
    "LLMProvider",
    "create_llm_provider",
    "ChatMessage",
    "LLMResponse",
    "StreamingResponse",
    "OpenAIProvider",
    "WorkerProvider",
]
