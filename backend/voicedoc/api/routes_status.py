"""Status passthrough to the Ollama server."""

from fastapi import APIRouter, Depends

from voicedoc.api.deps import get_ollama_client
from voicedoc.models.summary import OllamaStatus
from voicedoc.services.llm import OllamaClient

router = APIRouter()


@router.get("/ollama-status", response_model=OllamaStatus, response_model_exclude_none=True)
async def ollama_status(ollama: OllamaClient = Depends(get_ollama_client)) -> OllamaStatus:
    """List the models Ollama serves and whether the required one is among them.

    Always answers 200; an unreachable server is reported as ``connected: false``.
    """
    return await ollama.status()
