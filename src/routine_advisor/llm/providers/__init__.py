from .openai import OpenAIProvider
from .worker import WorkerProvider

__all__ = ["OpenAIProvider", "WorkerProvider"]
