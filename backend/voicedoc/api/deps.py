"""FastAPI dependencies shared by the API routers."""

from fastapi import Request

from voicedoc.services.llm import OllamaClient


def get_ollama_client(request: Request) -> OllamaClient:
    """Return the application's Ollama client (one connection pool per app)."""
    return request.app.state.ollama
