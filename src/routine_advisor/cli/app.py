"""Main CLI application using Typer."""
import asyncio
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.markdown import Markdown
from rich.table import Table
from rich.text import Text

from ..advisor import Bubble, ChatAdvisor
from ..errors import StorageError, UnknownProductError
from ..selection import SelectionStore
from ..storage import THEME_KEY, ThemePreference
from ..ui.config import LogLevel
from .providers import get_catalog, get_history_limit, get_model, get_store, require_llm

load_dotenv()

app = typer.Typer(
    name="routine-advisor",
    help="Pick beauty products and chat about a routine built from them",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()

CatalogOption = typer.Option(
    None, "--catalog", "-c", help="Catalog JSON file (default: bundled catalog)"
)
StateOption = typer.Option(
    None, "--state", help="State file for selection and theme"
)


def _open_selection(catalog_path: Path | None, state_path: Path | None) -> SelectionStore:
    catalog = get_catalog(catalog_path, console)
    store = get_store(state_path, console)
    return SelectionStore(store, catalog)


def _print_bubble(bubble: Bubble) -> None:
    if bubble.role == "user":
        console.print(Text.assemble(("You: ", "bold green"), bubble.text))
    elif bubble.is_error:
        console.print(Text(bubble.text, style="bold red"))
    else:
        console.print(Text("Advisor:", style="bold magenta"))
        console.print(Markdown(bubble.text))
    console.print()


def _console_debug_callback(threshold: int):
    """Route advisor debug messages to the console above `threshold`."""
    def _callback(level: str, component: str, message: str) -> None:
        if LogLevel.from_string(level) >= threshold:
            console.print(Text(f"[{level.upper()}] [{component}] {message}", style="dim"))
    return _callback


@app.command()
def categories(catalog_path: Path | None = CatalogOption):
    """List product categories."""
    catalog = get_catalog(catalog_path, console)
    for category in catalog.categories():
        count = len(catalog.filter_by_category(category))
        console.print(f"{category} [dim]({count})[/dim]", highlight=False)


@app.command()
def products(
    category: str | None = typer.Option(None, "--category", "-k", help="Only this category"),
    catalog_path: Path | None = CatalogOption,
    state_path: Path | None = StateOption,
):
    """Show the catalog, or one category of it."""
    selection = _open_selection(catalog_path, state_path)
    catalog = selection.catalog
    items = catalog.filter_by_category(category) if category else list(catalog)

    if not items:
        console.print(f"[yellow]No products in category: {category}[/yellow]")
        raise typer.Exit(code=1)

    table = Table(title=f"Products: {category}" if category else "Products")
    table.add_column("", width=1)
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("Brand", style="magenta")
    table.add_column("Name")
    table.add_column("Category", style="green")

    for product in items:
        table.add_row(
            "*" if selection.contains(product.id) else "",
            str(product.id),
            Text(product.brand),
            Text(product.name),
            Text(product.category),
        )

    console.print(table)
    console.print("[dim]* selected[/dim]")


@app.command()
def select(
    product_ids: list[int] = typer.Argument(..., help="Product ids to select"),
    catalog_path: Path | None = CatalogOption,
    state_path: Path | None = StateOption,
):
    """Add products to the selection."""
    selection = _open_selection(catalog_path, state_path)
    unknown = [pid for pid in product_ids if pid not in selection.catalog]
    if unknown:
        console.print(f"[red]Error: {UnknownProductError(unknown[0])}[/red]")
        raise typer.Exit(code=1)
    try:
        for product_id in product_ids:
            selection.add(product_id)
    except StorageError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]{len(selection)} product(s) selected[/green]")


@app.command()
def deselect(
    product_ids: list[int] = typer.Argument(..., help="Product ids to remove"),
    catalog_path: Path | None = CatalogOption,
    state_path: Path | None = StateOption,
):
    """Remove products from the selection."""
    selection = _open_selection(catalog_path, state_path)
    try:
        for product_id in product_ids:
            selection.remove(product_id)
    except StorageError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]{len(selection)} product(s) selected[/green]")


@app.command()
def clear(
    catalog_path: Path | None = CatalogOption,
    state_path: Path | None = StateOption,
):
    """Clear the selection."""
    selection = _open_selection(catalog_path, state_path)
    try:
        selection.clear()
    except StorageError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print("[green]Selection cleared[/green]")


@app.command()
def selected(
    catalog_path: Path | None = CatalogOption,
    state_path: Path | None = StateOption,
):
    """Show the selected products."""
    selection = _open_selection(catalog_path, state_path)
    items = selection.list()
    if not items:
        console.print("[dim]No products selected yet.[/dim]")
        return
    for product in items:
        console.print(Text.assemble((f"{product.id:>4}  ", "cyan"), product.label))


@app.command()
def theme(
    value: str | None = typer.Argument(None, help="dark or light (omit to show)"),
    state_path: Path | None = StateOption,
):
    """Show or set the persisted theme."""
    preference = ThemePreference(get_store(state_path, console))
    if value is None:
        console.print(preference.load())
        return
    try:
        preference.save(value.lower())
    except (ValueError, StorageError) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]{THEME_KEY} set to {value.lower()}[/green]")


@app.command()
def routine(
    chat: bool = typer.Option(
        False, "--chat", help="Keep asking follow-up questions after the routine"
    ),
    provider: str | None = typer.Option(
        None, "--provider", "-p", help="Chat endpoint: openai or worker"
    ),
    model: str | None = typer.Option(None, "--model", "-m", help="Model name"),
    history_limit: int | None = typer.Option(
        None, "--history-limit", min=1, help="Cap on transcript messages sent per request"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Print trace messages: debug, info, warning, or error"
    ),
    catalog_path: Path | None = CatalogOption,
    state_path: Path | None = StateOption,
):
    """Generate a routine from the selected products."""
    selection = _open_selection(catalog_path, state_path)

    async def _routine():
        llm = require_llm(console, provider=provider, model=get_model(model))
        advisor = ChatAdvisor(
            llm, selection, history_limit=get_history_limit(history_limit, console)
        )
        advisor.set_bubble_callback(_print_bubble)
        if log_level is not None:
            advisor.set_debug_callback(_console_debug_callback(LogLevel.from_string(log_level)))

        try:
            with console.status("[dim]Thinking...[/dim]"):
                reply = await advisor.generate_routine()
            if not reply.ok or not chat:
                if reply.errors:
                    raise typer.Exit(code=1)
                return

            console.print("[dim]Ask follow-up questions. Type 'exit', 'quit', or 'q' to leave.[/dim]\n")
            while True:
                try:
                    user_input = console.input("[bold yellow]You:[/bold yellow] ")
                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

                if user_input.strip().lower() in ("exit", "quit", "q"):
                    console.print("[dim]Goodbye![/dim]")
                    break
                if not user_input.strip():
                    continue

                with console.status("[dim]Thinking...[/dim]"):
                    await advisor.ask(user_input)
        finally:
            await llm.close()

    asyncio.run(_routine())


@app.command(name="tui")
def tui_command(
    provider: str | None = typer.Option(
        None, "--provider", "-p", help="Chat endpoint: openai or worker"
    ),
    model: str | None = typer.Option(None, "--model", "-m", help="Model name"),
    history_limit: int | None = typer.Option(
        None, "--history-limit", min=1, help="Cap on transcript messages sent per request"
    ),
    stream: bool = typer.Option(False, "--stream", help="Stream replies as they arrive"),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
    catalog_path: Path | None = CatalogOption,
    state_path: Path | None = StateOption,
):
    """Launch the interactive terminal UI."""
    catalog = get_catalog(catalog_path, console)
    store = get_store(state_path, console)

    async def _tui():
        from ..ui import run_textual_tui

        llm = require_llm(console, provider=provider, model=get_model(model))
        await run_textual_tui(
            catalog=catalog,
            store=store,
            llm=llm,
            history_limit=get_history_limit(history_limit, console),
            log_level=log_level,
            stream=stream,
        )

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
