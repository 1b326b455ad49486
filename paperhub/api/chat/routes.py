import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse, StreamingResponse
from openai import OpenAIError

from paperhub.api.chat import schemas, services

router = APIRouter()
logger = logging.getLogger(__name__)

# ---------------------------------------------------
# 🚀 Streaming Chat Endpoint
# ---------------------------------------------------

@router.post("")
async def chat(payload: schemas.ChatRequest):
    try:
        stream = await services.open_completion_stream(payload)
    except OpenAIError as e:
        logger.error("Chat backend unavailable: %s", e)
        return JSONResponse(
            status_code=502,
            content={
                "error": "Could not reach the model backend. Check that Ollama is running and the model is pulled.",
                "details": str(e),
            },
        )

    return StreamingResponse(
        services.ndjson_events(stream),
        media_type="application/x-ndjson",
    )
