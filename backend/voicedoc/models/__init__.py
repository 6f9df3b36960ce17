# Namespace for Pydantic models.
from .events import ChunkEvent, CompleteEvent, ErrorEvent, StartEvent, StreamEvent
from .summary import ErrorBody, OllamaStatus, SummarizationRequest, SummarizationResult

__all__ = [
    "ChunkEvent",
    "CompleteEvent",
    "ErrorBody",
    "ErrorEvent",
    "OllamaStatus",
    "StartEvent",
    "StreamEvent",
    "SummarizationRequest",
    "SummarizationResult",
]
