"""
FastAPI Router: completion streaming and health.

- POST /api/chat validates a chat history and streams the model's reply
- GET /health reports which provider serves completions
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from ..errors import BackendFailureError
from .config import CHAT_ROUTE, GENERIC_ERROR, STREAM_MEDIA_TYPE
from .pipeline import CompletionPipeline

logger = logging.getLogger("nightchat.api")

router = APIRouter()


def get_pipeline(request: Request) -> CompletionPipeline:
    return request.app.state.pipeline


@router.post(CHAT_ROUTE)
async def chat(request: Request):
    """
    Stream a chat completion.

    Request Body
    ------------
    {messages: [{role, content}, ...], max_tokens?, temperature?, top_p?}

    Returns
    -------
    StreamingResponse
        Generated text, flushed chunk by chunk.

    Raises
    ------
    InvalidRequestError -> 400
        If 'messages' is missing or not an array of message objects.
    BackendFailureError -> 500
        If the body cannot be decoded or the backend call fails.
    """
    try:
        payload = await request.json()
    except ValueError as exc:
        logger.exception("Error in chat API: undecodable request body")
        raise BackendFailureError(GENERIC_ERROR) from exc

    chunks = await get_pipeline(request).complete_chat(payload)
    return StreamingResponse(chunks, media_type=STREAM_MEDIA_TYPE)


@router.get("/health")
async def health(request: Request):
    llm = get_pipeline(request).llm
    return {"status": "ok", "provider": llm.name, "model": llm.model}
