"""`nightchat` command: API server, one-shot completions, identity and the chat client."""
import asyncio
import logging
import os

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ..chat.identity import login_user
from ..errors import NightChatError
from .providers import get_identity_store, get_llm, require_llm

load_dotenv()

app = typer.Typer(
    name="nightchat",
    help="Demo chat client with a streaming language-model completion endpoint",
    no_args_is_help=True,
    add_completion=True,
)

console = Console()


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-7s [%(name)s] %(message)s",
    )


@app.command()
def serve(
    host: str = typer.Option(
        os.getenv("NIGHTCHAT_HOST", "127.0.0.1"),
        "--host",
        "-h",
        help="Interface to bind"
    ),
    port: int = typer.Option(
        int(os.getenv("NIGHTCHAT_PORT", "8000")),
        "--port",
        "-p",
        help="Port to listen on"
    ),
    provider: str | None = typer.Option(
        None,
        "--provider",
        help="LLM provider: openai, deepseek or anthropic (default: $LLM_PROVIDER)"
    ),
    log_level: str = typer.Option(
        "info",
        "--log-level",
        "-l",
        help="Log level: debug, info, warning or error"
    ),
):
    """Serve POST /api/chat, streaming completions from the configured provider."""
    import uvicorn

    from ..api import create_app

    _configure_logging(log_level)
    llm = require_llm(console, provider)
    console.print(f"[dim]Serving {llm.name} ({llm.model}) on http://{host}:{port}/api/chat[/dim]")
    uvicorn.run(create_app(llm), host=host, port=port, log_level=log_level.lower())


@app.command()
def complete(
    prompt: str = typer.Argument(..., help="User message to complete"),
    system: str | None = typer.Option(
        None,
        "--system",
        "-s",
        help="Optional system prompt"
    ),
    max_tokens: int | None = typer.Option(None, "--max-tokens", help="Maximum tokens to generate"),
    temperature: float | None = typer.Option(None, "--temperature", help="Sampling temperature"),
    top_p: float | None = typer.Option(None, "--top-p", help="Nucleus sampling mass"),
    provider: str | None = typer.Option(None, "--provider", help="LLM provider override"),
):
    """Stream a one-shot completion through the request pipeline."""
    from ..api import CompletionPipeline

    payload: dict = {"messages": []}
    if system:
        payload["messages"].append({"role": "system", "content": system})
    payload["messages"].append({"role": "user", "content": prompt})
    for key, value in (("max_tokens", max_tokens), ("temperature", temperature), ("top_p", top_p)):
        if value is not None:
            payload[key] = value

    async def _complete():
        llm = require_llm(console, provider)
        try:
            pipeline = CompletionPipeline(llm)
            async for chunk in await pipeline.complete_chat(payload):
                console.print(chunk, end="", markup=False, highlight=False)
            console.print()
        except NightChatError as e:
            console.print(f"[red]Error: {e}[/red]")
            raise typer.Exit(code=1)
        finally:
            await llm.close()

    asyncio.run(_complete())


@app.command()
def login(
    email: str = typer.Option(..., "--email", "-e", prompt=True, help="Account email"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True, help="Account password"),
):
    """Store the session identity used by the chat client."""
    user = login_user(email, password)
    if user is None:
        console.print("[red]Login failed: please check your credentials[/red]")
        raise typer.Exit(code=1)
    get_identity_store().save(user)
    console.print(f"[green]Welcome back, {user.name}![/green]")


@app.command()
def logout():
    """Forget the stored session identity."""
    get_identity_store().clear()
    console.print("[dim]You have been logged out[/dim]")


@app.command()
def chat(
    seed: int | None = typer.Option(
        None,
        "--seed",
        help="Seed for demo contacts, history and replies"
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch the terminal chat client for the logged-in user."""
    from ..ui import run_chat_tui

    store = get_identity_store()
    user = store.load()
    if user is None:
        console.print("[red]Not logged in. Run: nightchat login[/red]")
        raise typer.Exit(code=1)

    try:
        asyncio.run(run_chat_tui(user, seed=seed, log_level=log_level))
    except KeyboardInterrupt:
        pass
    console.print("[dim]Chat closed[/dim]")


@app.command()
def health(
    provider: str | None = typer.Option(None, "--provider", help="LLM provider override"),
):
    """Check provider configuration and the stored identity."""
    async def _health():
        all_healthy = True
        table = Table(show_header=False, box=None)
        table.add_column("Check", style="bold cyan", width=15)
        table.add_column("Status")

        llm = get_llm(console, provider)
        if llm is None:
            table.add_row("Provider", "[red]x not configured[/red]")
            all_healthy = False
        else:
            table.add_row("Provider", f"[green]+[/green] {llm.name} ({llm.model})")
            await llm.close()

        user = get_identity_store().load()
        if user is None:
            table.add_row("Identity", "[yellow]not logged in[/yellow]")
        else:
            table.add_row("Identity", f"[green]+[/green] {user.name} <{user.email}>")

        console.print(table)
        if not all_healthy:
            raise typer.Exit(code=1)

    asyncio.run(_health())


def main():
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    main()
