"""FastAPI application factory for the completion endpoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..errors import BackendFailureError, InvalidRequestError
from ..llm.base import LLMProvider
from .config import GENERIC_ERROR
from .pipeline import CompletionPipeline
from .routes import router

logger = logging.getLogger("nightchat.api")


async def _invalid_request_handler(request: Request, exc: InvalidRequestError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def _backend_failure_handler(request: Request, exc: BackendFailureError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": GENERIC_ERROR})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"error": GENERIC_ERROR})


def create_app(llm: LLMProvider, close_llm_on_shutdown: bool = True) -> FastAPI:
    """Create the HTTP application serving completions from ``llm``.

    Args:
        llm: Provider every request is forwarded to
        close_llm_on_shutdown: Close the provider's client when the app stops

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Serving completions with %s (%s)", llm.name, llm.model)
        yield
        if close_llm_on_shutdown:
            await llm.close()

    app = FastAPI(
        title="NightChat Completion API",
        description="Streams language-model completions for a chat history.",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.pipeline = CompletionPipeline(llm)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InvalidRequestError, _invalid_request_handler)
    app.add_exception_handler(BackendFailureError, _backend_failure_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)

    app.include_router(router)
    return app
