"""Textual terminal client for NightChat."""

from .app import NightChatApp, run_chat_tui

__all__ = ["NightChatApp", "run_chat_tui"]
