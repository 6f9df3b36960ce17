"""Relay an Ollama token stream to the browser as Server-Sent Events.

The relay walks ``Idle -> Opened -> Relaying -> Closed``:

* ``Idle -> Opened``: the input is validated and a ``start`` event emitted
  (blank input goes straight to ``Closed`` with an ``error`` event).
* ``Opened -> Relaying``: the upstream streaming call is open.
* ``Relaying -> Closed``: on ``done``, on upstream end, on an upstream
  error, or when the consumer stops iterating (client disconnect).

Exactly one terminal event (``complete`` or ``error``) is produced on every
path that reaches the consumer, and nothing is produced after it.
"""

from __future__ import annotations

import logging
from contextlib import aclosing
from enum import Enum
from typing import AsyncIterator, Awaitable, Callable, Optional

from voicedoc.errors import StreamError
from voicedoc.models.events import ChunkEvent, CompleteEvent, ErrorEvent, StartEvent, StreamEvent
from voicedoc.services.llm import EMPTY_TEXT_MESSAGE, OllamaClient, build_summary_prompt
from voicedoc.services.ndjson import iter_records

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class RelayState(str, Enum):
    IDLE = "idle"
    OPENED = "opened"
    RELAYING = "relaying"
    CLOSED = "closed"


class SummaryStreamRelay:
    """One streaming summarization; single use."""

    def __init__(self, client: OllamaClient, text: str) -> None:
        self._client = client
        self.text = text
        self.state = RelayState.IDLE
        self.accumulated = ""
        self.chunks = 0

    def _emit(self, event: StreamEvent) -> StreamEvent:
        if self.state is RelayState.CLOSED:
            raise RuntimeError(f"cannot emit {event.type!r}: relay already closed")
        if event.is_terminal:
            self.state = RelayState.CLOSED
        return event

    def _complete(self) -> CompleteEvent:
        return CompleteEvent(content=self.accumulated.strip(), original_text=self.text)

    async def events(self) -> AsyncIterator[StreamEvent]:
        if self.state is not RelayState.IDLE:
            raise RuntimeError("a relay can only be run once")

        if not self.text or not self.text.strip():
            yield self._emit(ErrorEvent(message=EMPTY_TEXT_MESSAGE))
            return

        self.state = RelayState.OPENED
        yield self._emit(StartEvent())

        terminal: Optional[StreamEvent] = None
        try:
            async with self._client.stream_generate(build_summary_prompt(self.text)) as response:
                self.state = RelayState.RELAYING
                async with aclosing(iter_records(response.aiter_bytes())) as records:
                    async for record in records:
                        if "error" in record:
                            raise StreamError(f"Ollama error: {record['error']}")
                        fragment = record.get("response")
                        if isinstance(fragment, str) and fragment:
                            self.accumulated += fragment
                            self.chunks += 1
                            yield self._emit(
                                ChunkEvent(content=fragment, accumulated_content=self.accumulated)
                            )
                        if record.get("done"):
                            break
                    else:
                        logger.warning("Upstream stream ended without a done flag after %d chunk(s)", self.chunks)
            terminal = self._complete()
        except StreamError as exc:
            logger.error("Streaming summary failed: %s", exc.message)
            terminal = ErrorEvent(message=exc.message)
        except Exception as exc:
            logger.exception("Unexpected failure while relaying summary stream")
            terminal = ErrorEvent(message=f"Streaming failed: {exc}")
        finally:
            if self.state is not RelayState.CLOSED and terminal is None:
                # Consumer went away mid-stream; leaving the block above has
                # already closed the upstream response.
                logger.info("Client disconnected after %d chunk(s); upstream stream closed", self.chunks)
                self.state = RelayState.CLOSED

        logger.info("Summary stream finished with %r after %d chunk(s)", terminal.type, self.chunks)
        yield self._emit(terminal)

    async def sse(self, is_disconnected: Optional[Callable[[], Awaitable[bool]]] = None) -> AsyncIterator[str]:
        """Same events, rendered as SSE frames.

        *is_disconnected* is polled after every non-terminal frame; once it
        reports the client gone the relay is closed, which closes upstream.
        """

        async with aclosing(self.events()) as events:
            async for event in events:
                yield event.to_sse()
                if is_disconnected is not None and not event.is_terminal and await is_disconnected():
                    break
