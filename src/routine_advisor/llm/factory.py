from typing import Any

from .base import LLMProvider
from .providers import OpenAIProvider, WorkerProvider


def create_llm_provider(provider: str, **config: Any) -> LLMProvider:
    """Create a chat endpoint provider.

    This factory function hides the instantiation logic for different endpoints.

    Args:
        provider: Provider type ('openai', 'worker')
        **config: Provider-specific configuration
            For OpenAI:
                - api_key: str (required)
                - model: str (default: 'gpt-4o')
                - base_url: str | None
                - organization: str | None
            For Worker:
                - url: str (required)
                - model: str (default: 'gpt-4o')
                - headers: dict[str, str] | None
                - timeout: float | None

    Returns:
        Initialized provider instance

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing

    Examples:
        >>> provider = create_llm_provider(
        ...     "worker",
        ...     url="https://advisor.example.workers.dev/"
        ... )

        >>> provider = create_llm_provider(
        ...     "openai",
        ...     api_key="sk-...",
        ...     model="gpt-4o"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower == "openai":
        if "api_key" not in config:
            raise TypeError("OpenAI provider requires 'api_key' in config")
        return OpenAIProvider(**config)

    if provider_lower == "worker":
        if "url" not in config:
            raise TypeError("Worker provider requires 'url' in config")
        return WorkerProvider(**config)

    raise ValueError(
        f"Unsupported provider: {provider}. "
        f"Supported providers: 'openai', 'worker'"
    )
