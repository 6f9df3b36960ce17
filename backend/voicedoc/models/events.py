"""Server-Sent Events emitted by the streaming summarization relay.

``StreamEvent`` is a discriminated union on ``type``; every variant knows how
to render itself as a single SSE frame (``data: <json>\\n\\n``).
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field, TypeAdapter

from voicedoc.models.summary import CamelModel


class _Event(CamelModel):
    def to_sse(self) -> str:
        return f"data: {self.model_dump_json(by_alias=True)}\n\n"

    @property
    def is_terminal(self) -> bool:
        return False


class StartEvent(_Event):
    type: Literal["start"] = "start"


class ChunkEvent(_Event):
    type: Literal["chunk"] = "chunk"
    content: str
    accumulated_content: str


class CompleteEvent(_Event):
    type: Literal["complete"] = "complete"
    content: str
    original_text: str

    @property
    def is_terminal(self) -> bool:
        return True


class ErrorEvent(_Event):
    type: Literal["error"] = "error"
    message: str

    @property
    def is_terminal(self) -> bool:
        return True


StreamEvent = Annotated[
    Union[StartEvent, ChunkEvent, CompleteEvent, ErrorEvent],
    Field(discriminator="type"),
]

_stream_event_adapter: TypeAdapter = TypeAdapter(StreamEvent)


def parse_sse_frame(frame: str) -> StreamEvent:
    """Inverse of ``to_sse`` for one frame; used by clients and tests."""

    payload = frame.strip()
    if payload.startswith("data:"):
        payload = payload[len("data:"):].strip()
    return _stream_event_adapter.validate_json(payload)
