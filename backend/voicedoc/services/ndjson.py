"""Newline-delimited JSON decoding over an arbitrarily chunked byte stream.

Ollama's streaming ``/api/generate`` writes one JSON object per line, but the
HTTP body reaches us in chunks that need not line up with those lines: a
record (or a multi-byte UTF-8 character) may be split across two chunks.
:class:`NDJSONBuffer` keeps the unterminated tail between chunks and only
decodes complete lines.
"""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterable, AsyncIterator, Dict, List, Optional

logger = logging.getLogger(__name__)


class NDJSONBuffer:
    """Accumulate bytes, split on ``\\n``, keep the remainder."""

    def __init__(self) -> None:
        self._pending = bytearray()
        self.skipped = 0

    def feed(self, chunk: bytes) -> List[Dict[str, Any]]:
        """Add *chunk* and return every record completed by it, in order."""

        self._pending.extend(chunk)
        records: List[Dict[str, Any]] = []
        while True:
            newline = self._pending.find(b"\n")
            if newline < 0:
                break
            line = bytes(self._pending[:newline])
            del self._pending[: newline + 1]
            record = self._decode(line)
            if record is not None:
                records.append(record)
        return records

    def flush(self) -> List[Dict[str, Any]]:
        """Decode whatever is left once the stream has ended."""

        line = bytes(self._pending)
        self._pending.clear()
        record = self._decode(line)
        return [record] if record is not None else []

    @property
    def pending(self) -> int:
        return len(self._pending)

    def _decode(self, line: bytes) -> Optional[Dict[str, Any]]:
        line = line.strip()
        if not line:
            return None
        try:
            record = json.loads(line.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            self.skipped += 1
            logger.debug("Skipping malformed upstream record: %r", line[:200])
            return None
        if not isinstance(record, dict):
            self.skipped += 1
            logger.debug("Skipping non-object upstream record: %r", line[:200])
            return None
        return record


async def iter_records(chunks: AsyncIterable[bytes]) -> AsyncIterator[Dict[str, Any]]:
    """Yield decoded records from an async byte-chunk iterator."""

    buffer = NDJSONBuffer()
    async for chunk in chunks:
        for record in buffer.feed(chunk):
            yield record
    for record in buffer.flush():
        yield record
