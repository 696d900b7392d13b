"""Provider factory functions for CLI.

Centralizes creation of the catalog, the local store, and the chat endpoint
from environment variables. Hides configuration details from command
implementations.
"""

import os
from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from ..catalog import Catalog, load_catalog
from ..errors import CatalogError, StorageError
from ..llm import DEFAULT_MODEL, LLMProvider, create_llm_provider
from ..storage import DEFAULT_STATE_PATH, KeyValueStore, create_store

_console = Console()


def get_catalog(path: Path | None = None, console: Console | None = None) -> Catalog:
    """Load the catalog.

    Environment variables:
        ADVISOR_CATALOG: Catalog JSON path (default: bundled catalog)
    """
    con = console or _console
    catalog_path = path or os.getenv("ADVISOR_CATALOG") or None
    try:
        return load_catalog(catalog_path)
    except CatalogError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def get_store(path: Path | None = None, console: Console | None = None) -> KeyValueStore:
    """Open the local state file.

    Environment variables:
        ADVISOR_STATE_PATH: JSON state file (default: ~/.routine_advisor/state.json)
    """
    con = console or _console
    state_path = path or os.getenv("ADVISOR_STATE_PATH") or DEFAULT_STATE_PATH
    try:
        return create_store("json", path=state_path)
    except StorageError as e:
        con.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)


def get_model(model: str | None = None) -> str:
    """Model name.

    Environment variables:
        ADVISOR_MODEL: Model name (default: gpt-4o)
    """
    return model or os.getenv("ADVISOR_MODEL") or DEFAULT_MODEL


def get_history_limit(limit: int | None = None, console: Console | None = None) -> int | None:
    """Transcript cap per request, or None for the whole transcript.

    Environment variables:
        ADVISOR_HISTORY_LIMIT: Positive integer
    """
    if limit is not None:
        return limit
    raw = os.getenv("ADVISOR_HISTORY_LIMIT")
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        (console or _console).print(
            f"[yellow]Warning: ignoring non-integer ADVISOR_HISTORY_LIMIT={raw!r}[/yellow]"
        )
        return None
    return value if value > 0 else None


def get_llm(
    console: Console | None = None,
    provider: str | None = None,
    model: str | None = None,
) -> LLMProvider | None:
    """Create the chat endpoint provider from environment variables.

    Returns:
        Provider instance, or None if not configured

    Environment variables:
        ADVISOR_PROVIDER: openai or worker (default: worker if
            ADVISOR_WORKER_URL is set, otherwise openai)
        ADVISOR_WORKER_URL: Proxy endpoint URL (for worker provider)
        OPENAI_API_KEY: OpenAI API key (for openai provider)
        OPENAI_BASE_URL: Optional OpenAI-compatible base URL
    """
    con = console or _console
    worker_url = os.getenv("ADVISOR_WORKER_URL")
    provider_name = (provider or os.getenv("ADVISOR_PROVIDER") or ("worker" if worker_url else "openai")).lower()
    model_name = get_model(model)

    if provider_name == "worker":
        if not worker_url:
            con.print("[yellow]Warning: ADVISOR_WORKER_URL not set, chat disabled[/yellow]")
            return None
        return create_llm_provider("worker", url=worker_url, model=model_name)

    elif provider_name == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            con.print("[yellow]Warning: OPENAI_API_KEY not set, chat disabled[/yellow]")
            return None
        config: dict[str, Any] = {"api_key": api_key, "model": model_name}
        base_url = os.getenv("OPENAI_BASE_URL")
        if base_url:
            config["base_url"] = base_url
        return create_llm_provider("openai", **config)

    con.print(f"[red]Error: Unknown provider: {provider_name}[/red]")
    return None


def require_llm(
    console: Console | None = None,
    provider: str | None = None,
    model: str | None = None,
) -> LLMProvider:
    """Get the chat endpoint provider, exiting if it is not configured."""
    con = console or _console
    llm = get_llm(con, provider=provider, model=model)
    if not llm:
        con.print("[red]Error: chat endpoint not configured "
                  "(set ADVISOR_WORKER_URL or OPENAI_API_KEY)[/red]")
        raise typer.Exit(code=1)
    return llm
