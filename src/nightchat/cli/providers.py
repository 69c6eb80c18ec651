"""Environment-driven construction of the objects CLI commands need.

Commands ask for an LLM or an identity store here and never read the
environment themselves.
"""

import os
from pathlib import Path

import typer
from rich.console import Console

from ..chat.config import IDENTITY_FILE_NAME
from ..chat.identity import IdentityStore
from ..llm import LLMProvider, create_llm_provider

_console = Console()

# provider -> (api key variable, model variable or None)
_PROVIDER_ENV = {
    "openai": ("OPENAI_API_KEY", "OPENAI_CHAT_MODEL"),
    "deepseek": ("DEEPSEEK_API_KEY", None),
    "anthropic": ("ANTHROPIC_API_KEY", "ANTHROPIC_MODEL"),
}


def get_llm(console: Console | None = None, provider: str | None = None) -> LLMProvider | None:
    """Build the configured completion backend, or None when it is unusable.

    ``provider`` overrides ``LLM_PROVIDER`` (default ``openai``). The API key
    comes from ``OPENAI_API_KEY``, ``DEEPSEEK_API_KEY`` or ``ANTHROPIC_API_KEY``;
    ``OPENAI_CHAT_MODEL`` and ``ANTHROPIC_MODEL`` optionally pick the model.
    """
    con = console or _console
    name = (provider or os.getenv("LLM_PROVIDER", "openai")).lower()
    if name == "claude":
        name = "anthropic"

    if name not in _PROVIDER_ENV:
        con.print(f"[red]Error: Unknown LLM provider: {name}[/red]")
        return None

    key_var, model_var = _PROVIDER_ENV[name]
    api_key = os.getenv(key_var)
    if not api_key:
        con.print(f"[yellow]Warning: {key_var} not set, completions disabled[/yellow]")
        return None

    config: dict[str, str] = {"api_key": api_key}
    model = os.getenv(model_var) if model_var else None
    if model:
        config["model"] = model
    return create_llm_provider(name, **config)


def require_llm(console: Console | None = None, provider: str | None = None) -> LLMProvider:
    """Like ``get_llm`` but exits the command when no backend is configured.

    Raises:
        typer.Exit: If LLM provider is not configured
    """
    con = console or _console
    llm = get_llm(con, provider)
    if llm is None:
        con.print("[red]Error: LLM provider not configured[/red]")
        raise typer.Exit(code=1)
    return llm


def get_identity_store(path: str | None = None) -> IdentityStore:
    """Identity store at ``path``, ``NIGHTCHAT_IDENTITY_PATH`` or ~/.nightchat."""
    location = path or os.getenv("NIGHTCHAT_IDENTITY_PATH")
    if not location:
        location = str(Path.home() / ".nightchat" / IDENTITY_FILE_NAME)
    return IdentityStore(location)
