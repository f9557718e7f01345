"""
Summarization engine capability.

An engine turns a piece of transcript text into a ChunkResult and can
condense already summarized text into one coherent summary. The
orchestrator only depends on this interface; the wire format of any
backing service stays inside the engine.
"""

from abc import ABC, abstractmethod

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.config import LOCAL_ENGINE_TIMEOUT_SECONDS, MAX_TOKENS_PER_CHUNK
from transcript_digest.digest.result_types import ChunkResult


class SummarizationEngine(ABC):
    """
    Abstract summarization engine.

    Class Attributes:
        name: Engine name (part of the cache fingerprint)
        version: Engine version (part of the cache fingerprint)

    Instance Attributes:
        max_input_tokens: Largest estimated token count accepted per call
        timeout_seconds: Per-call limit enforced by the orchestrator, or None
    """

    name: str = "base"
    version: str = "1.0"

    def __init__(self, max_input_tokens: int = MAX_TOKENS_PER_CHUNK,
                 timeout_seconds: float | None = LOCAL_ENGINE_TIMEOUT_SECONDS):
        self.max_input_tokens = max_input_tokens
        self.timeout_seconds = timeout_seconds

    @property
    def identity(self) -> str:
        """Stable identifier used in cache keys."""
        return f"{self.name}:{self.version}"

    @abstractmethod
    def process_complete(self, text: str) -> ChunkResult:
        """
        Classify, extract and summarize one piece of text.

        Raises:
            EngineError: When the backing service fails; the orchestrator
                retries and eventually skips the chunk.
        """

    @abstractmethod
    def summarize(self, text: str, content_type: ContentType) -> str:
        """Condense text (typically joined chunk summaries) into one summary."""

    def is_available(self) -> bool:
        return True

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(identity={self.identity!r}, max_input_tokens={self.max_input_tokens})"
