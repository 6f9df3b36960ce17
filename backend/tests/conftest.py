"""Shared fixtures: a stub Ollama server behind ``httpx.MockTransport``."""

from __future__ import annotations

import asyncio
import json
from typing import Iterable, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from voicedoc.config import Settings
from voicedoc.main import create_app
from voicedoc.services.llm import OllamaClient

OLLAMA_URL = "http://ollama.test:11434"


class ChunkedBody(httpx.AsyncByteStream):
    """Upstream body delivered in exactly the given chunks.

    With ``hang=True`` the body never ends after the last chunk, like a model
    that is still generating.  ``closed`` records whether the proxy let go of
    the upstream response.
    """

    def __init__(self, chunks: Iterable[bytes], hang: bool = False) -> None:
        self.chunks = list(chunks)
        self.hang = hang
        self.sent = 0
        self.closed = False

    async def __aiter__(self):
        for chunk in self.chunks:
            self.sent += 1
            yield chunk
        if self.hang:
            await asyncio.Event().wait()

    async def aclose(self) -> None:
        self.closed = True


def ndjson(*records: dict) -> bytes:
    return b"".join(json.dumps(r, ensure_ascii=False).encode("utf-8") + b"\n" for r in records)


def split_every(data: bytes, size: int) -> List[bytes]:
    return [data[i:i + size] for i in range(0, len(data), size)]


class StubOllama:
    """Minimal stand-in for the two Ollama endpoints the proxy uses."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.refuse_connections = False
        self.models = ["mistral:latest", "llama2:7b"]
        self.tags_status = 200
        self.generate_status = 200
        self.generate_json: object = {"model": "mistral", "response": " Summary. ", "done": True}
        self.stream_status = 200
        self.stream_chunks: List[bytes] = [
            ndjson(
                {"response": "Sum", "done": False},
                {"response": "mary.", "done": False},
                {"response": "", "done": True},
            )
        ]
        self.stream_hang = False
        self.stream_body: Optional[ChunkedBody] = None

    @property
    def generate_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == "/api/generate"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.refuse_connections:
            raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

        if request.url.path == "/api/tags":
            return httpx.Response(
                self.tags_status,
                json={"models": [{"name": name, "size": 1} for name in self.models]},
            )

        if request.url.path == "/api/generate":
            payload = json.loads(request.content)
            if payload.get("stream"):
                self.stream_body = ChunkedBody(self.stream_chunks, hang=self.stream_hang)
                return httpx.Response(
                    self.stream_status,
                    headers={"content-type": "application/x-ndjson"},
                    stream=self.stream_body,
                )
            if isinstance(self.generate_json, (dict, list)):
                return httpx.Response(self.generate_status, json=self.generate_json)
            return httpx.Response(self.generate_status, text=str(self.generate_json))

        return httpx.Response(404, json={"error": "not found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def stub() -> StubOllama:
    return StubOllama()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        ollama_url=OLLAMA_URL,
        model_name="mistral",
        frontend_dir=str(tmp_path / "no-frontend"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def ollama(settings: Settings, stub: StubOllama) -> OllamaClient:
    return OllamaClient(settings, transport=stub.transport)


@pytest.fixture
def client(settings: Settings, stub: StubOllama) -> TestClient:
    return TestClient(create_app(settings, transport=stub.transport))
