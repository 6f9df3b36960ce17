"""Abstraction layer around the Ollama REST API.

Public API:

* :meth:`OllamaClient.status` – ``GET /api/tags`` folded into an
  :class:`~voicedoc.models.summary.OllamaStatus`; never raises.
* :meth:`OllamaClient.summarize` – one blocking ``POST /api/generate`` call.
* :meth:`OllamaClient.stream_generate` – the same call with ``stream=True``,
  exposed as an async context manager around the upstream response.

One :class:`httpx.AsyncClient` (and therefore one connection pool) is shared
by every request of an application; each request owns its own upstream call.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from voicedoc.config import Settings
from voicedoc.errors import GenerationFailed, InvalidInput, StreamError, UpstreamUnavailable
from voicedoc.models.summary import OllamaStatus, SummarizationResult

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Please provide a concise and professional summary of the following text. "
    "Focus on the key points and main ideas:\n\n{text}"
)

# Fixed sampling parameters sent with every generation request.
GENERATION_OPTIONS: Dict[str, Any] = {
    "temperature": 0.7,
    "max_tokens": 500,
}

EMPTY_TEXT_MESSAGE = "Text is required for summarization"


def build_summary_prompt(text: str) -> str:
    return PROMPT_TEMPLATE.format(text=text)


class OllamaClient:
    """Thin async wrapper around one Ollama server."""

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = settings.OLLAMA_URL
        self.model = settings.MODEL_NAME
        if http_client is None:
            http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(settings.OLLAMA_TIMEOUT, connect=settings.OLLAMA_CONNECT_TIMEOUT),
                limits=httpx.Limits(max_connections=20, max_keepalive_connections=20),
                transport=transport,
            )
        self._client = http_client

    @property
    def generate_url(self) -> str:
        return f"{self.base_url}/api/generate"

    @property
    def tags_url(self) -> str:
        return f"{self.base_url}/api/tags"

    def generate_payload(self, prompt: str, stream: bool) -> Dict[str, Any]:
        return {
            "model": self.model,
            "prompt": prompt,
            "stream": stream,
            "options": dict(GENERATION_OPTIONS),
        }

    async def aclose(self) -> None:
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Status passthrough
    # ------------------------------------------------------------------

    async def list_models(self) -> List[str]:
        response = await self._client.get(self.tags_url)
        response.raise_for_status()
        models = response.json().get("models") or []
        return [m["name"] for m in models if isinstance(m, dict) and "name" in m]

    async def status(self) -> OllamaStatus:
        """Report whether Ollama is reachable and has the configured model.

        Failures are encoded in the payload (``connected=False``), never raised.
        """
        try:
            models = await self.list_models()
        except Exception as exc:  # any failure means "not connected"
            message = str(exc) or exc.__class__.__name__
            logger.warning("Ollama status check against %s failed: %s", self.tags_url, message)
            return OllamaStatus(connected=False, required_model=self.model, error=message)

        has_model = any(self.model in name for name in models)
        logger.info("Ollama reachable at %s; %d model(s), required model %r present: %s",
                    self.base_url, len(models), self.model, has_model)
        return OllamaStatus(
            connected=True,
            models=models,
            has_required_model=has_model,
            required_model=self.model,
        )

    # ------------------------------------------------------------------
    # Synchronous summarization
    # ------------------------------------------------------------------

    async def generate(self, prompt: str) -> str:
        """Issue one non-streaming generation call and return the raw text.

        Raises:
            UpstreamUnavailable: Ollama refused the connection.
            GenerationFailed: any other upstream failure.
        """
        payload = self.generate_payload(prompt, stream=False)
        logger.info("Requesting generation from %s (model=%s, prompt=%d chars)",
                    self.generate_url, self.model, len(prompt))
        try:
            response = await self._client.post(self.generate_url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.ConnectError as e:
            logger.error("Cannot connect to Ollama at %s: %s", self.base_url, e)
            raise UpstreamUnavailable(self.base_url) from e
        except httpx.HTTPStatusError as e:
            logger.error("HTTP error %s from Ollama: %s", e.response.status_code, e.response.text)
            raise GenerationFailed(f"Ollama returned HTTP {e.response.status_code}: {e.response.text}") from e
        except httpx.HTTPError as e:
            logger.error("Request to Ollama failed: %r", e, exc_info=True)
            raise GenerationFailed(str(e) or e.__class__.__name__) from e
        except ValueError as e:
            logger.error("Ollama returned a body that is not JSON: %s", e)
            raise GenerationFailed(f"Invalid JSON from Ollama: {e}") from e

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            logger.error("Ollama response missing 'response' field: %s", data)
            raise GenerationFailed("Ollama response missing 'response' field")
        return text

    async def summarize(self, text: str) -> SummarizationResult:
        if not text or not text.strip():
            raise InvalidInput(EMPTY_TEXT_MESSAGE)
        summary = await self.generate(build_summary_prompt(text))
        return SummarizationResult(summary=summary.strip(), original_text=text)

    # ------------------------------------------------------------------
    # Streaming
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def stream_generate(self, prompt: str) -> AsyncIterator[httpx.Response]:
        """Open a streaming generation call.

        The upstream response is closed when the ``async with`` block exits,
        however it exits (normal end, error, or the consumer going away).
        Transport failures, inside or outside the block, surface as
        :class:`~voicedoc.errors.StreamError`.
        """
        payload = self.generate_payload(prompt, stream=True)
        logger.info("Opening generation stream to %s (model=%s, prompt=%d chars)",
                    self.generate_url, self.model, len(prompt))
        try:
            async with self._client.stream("POST", self.generate_url, json=payload) as response:
                if response.is_error:
                    body = (await response.aread()).decode("utf-8", errors="replace")
                    raise StreamError(f"Ollama returned HTTP {response.status_code}: {body}")
                yield response
        except httpx.ConnectError as e:
            logger.error("Cannot connect to Ollama at %s: %s", self.base_url, e)
            raise StreamError(f"Cannot connect to Ollama at {self.base_url}") from e
        except httpx.HTTPError as e:
            logger.error("Upstream stream failed: %r", e)
            raise StreamError(f"Upstream stream failed: {str(e) or e.__class__.__name__}") from e
