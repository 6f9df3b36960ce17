"""Endpoints that summarize transcript text via Ollama."""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from voicedoc.api.deps import get_ollama_client
from voicedoc.models.summary import ErrorBody, SummarizationRequest, SummarizationResult
from voicedoc.services.llm import OllamaClient
from voicedoc.services.streaming import SSE_HEADERS, SummaryStreamRelay

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/summarize",
    response_model=SummarizationResult,
    responses={400: {"model": ErrorBody}, 500: {"model": ErrorBody}, 503: {"model": ErrorBody}},
)
async def summarize(
    body: SummarizationRequest,
    ollama: OllamaClient = Depends(get_ollama_client),
) -> SummarizationResult:
    """Summarize ``text`` with one blocking call to Ollama."""
    logger.info("Summarization requested (%d chars)", len(body.text))
    return await ollama.summarize(body.text)


@router.post("/summarize-stream")
async def summarize_stream(
    body: SummarizationRequest,
    request: Request,
    ollama: OllamaClient = Depends(get_ollama_client),
) -> StreamingResponse:
    """Summarize ``text`` and relay the tokens as Server-Sent Events.

    Errors after this point are reported as a terminal ``error`` event, not
    as an HTTP status: the SSE headers go out with the first frame.
    """
    logger.info("Streaming summarization requested (%d chars)", len(body.text))
    relay = SummaryStreamRelay(ollama, body.text)
    return StreamingResponse(
        relay.sse(is_disconnected=request.is_disconnected),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
