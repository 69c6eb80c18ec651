"""Completion endpoint for NightChat.

Module structure:
- config.py: defaults and client-visible error strings
- models.py: request validation and parameter defaulting
- pipeline.py: forwarding and chunk relay
- routes.py / app.py: HTTP surface (FastAPI)
"""

from .app import create_app
from .models import CompletionRequest, GenerationParams
from .pipeline import CompletionPipeline

__all__ = [
    "CompletionPipeline",
    "CompletionRequest",
    "GenerationParams",
    "create_app",
]
