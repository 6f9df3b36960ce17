"""Request/response schemas for the summarization and status endpoints.

Field names are snake_case in Python and camelCase on the wire, matching the
JSON the browser client reads (``originalText``, ``hasRequiredModel``, …).
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SummarizationRequest(CamelModel):
    """Body of ``POST /api/summarize`` and ``POST /api/summarize-stream``.

    A missing ``text`` is treated like an empty one so both end up as the
    same ``InvalidInput`` error instead of a validation failure.
    """

    text: str = ""

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()


class SummarizationResult(CamelModel):
    success: bool = True
    summary: str
    original_text: str


class OllamaStatus(CamelModel):
    """Snapshot of the upstream server, recomputed on every request."""

    connected: bool
    models: List[str] = Field(default_factory=list)
    has_required_model: bool = False
    required_model: str
    error: Optional[str] = None


class ErrorBody(BaseModel):
    error: str
    details: Optional[str] = None
