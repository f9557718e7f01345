"""
Result types for digest runs.

ChunkResult is what an engine returns for one piece of text. Digest is the
final output of a run; its diagnostics describe how the run went but are
not part of the functional result.
"""

from dataclasses import dataclass, field
from enum import Enum

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.extraction.models import ReminderItem, TaskItem, TitleItem


@dataclass
class ChunkResult:
    """
    Engine output for one chunk (or for a whole short transcript).

    Attributes:
        summary: Summary text for this chunk
        tasks: Extracted tasks, ranked
        reminders: Extracted reminders, ranked
        titles: Candidate titles, ranked
        content_type: Classification of this chunk
        key_phrases: Most frequent names and nouns
        processing_time: Seconds spent by the engine
    """
    summary: str
    tasks: list[TaskItem] = field(default_factory=list)
    reminders: list[ReminderItem] = field(default_factory=list)
    titles: list[TitleItem] = field(default_factory=list)
    content_type: ContentType = ContentType.GENERAL
    key_phrases: list[str] = field(default_factory=list)
    processing_time: float = 0.0


class ChunkState(Enum):
    """
    Lifecycle of a chunk within one run:
    pending -> attempting -> succeeded | retrying -> attempting | failed
    """
    PENDING = "pending"
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ChunkState.SUCCEEDED, ChunkState.FAILED)


@dataclass
class ChunkOutcome:
    """
    Final state of one chunk after retries.

    A FAILED outcome has no result and contributes nothing to the merge.
    """
    sequence: int
    state: ChunkState
    attempts: int = 0
    result: ChunkResult | None = None
    error_message: str | None = None

    def __post_init__(self):
        if not self.state.is_terminal:
            raise ValueError(f"Chunk outcome needs a final state, got {self.state.value}")
        if self.state is ChunkState.FAILED and not self.error_message:
            self.error_message = "Chunk failed after all retry attempts"


@dataclass
class DigestDiagnostics:
    """
    How a run went. Exposed for logging and tests only.

    Attributes:
        chunk_count: Chunks the transcript was split into (1 on the direct path)
        skipped_chunks: Chunks that exhausted their retries
        cache_hit: True when the digest came from the result cache
        classification_confidence: Classifier confidence for the whole transcript
        chunk_states: Final ChunkState per sequence number
        timing: Milliseconds per phase
        engine_identity: Engine that produced the digest
        warnings: Non-fatal validation warnings
    """
    chunk_count: int = 1
    skipped_chunks: int = 0
    cache_hit: bool = False
    classification_confidence: float = 0.0
    chunk_states: dict[int, ChunkState] = field(default_factory=dict)
    timing: dict[str, float] = field(default_factory=dict)
    engine_identity: str = ""
    warnings: list[str] = field(default_factory=list)

    @property
    def total_time_ms(self) -> float:
        return sum(self.timing.values())

    @property
    def used_chunks(self) -> int:
        return self.chunk_count - self.skipped_chunks


@dataclass
class Digest:
    """
    Structured digest of one transcript.

    Attributes:
        summary: Coherent summary of the whole transcript
        tasks: Ranked actionable tasks
        reminders: Ranked time-sensitive reminders
        titles: Ranked candidate titles
        content_type: Overall classification
        key_phrases: Most frequent names and nouns across the transcript
        readability: Reading ease in [0, 1], 1 being easiest
        word_count: Words in the original transcript
        original_length: Characters in the original transcript
        diagnostics: Run details (not part of the functional result)
    """
    summary: str
    tasks: list[TaskItem] = field(default_factory=list)
    reminders: list[ReminderItem] = field(default_factory=list)
    titles: list[TitleItem] = field(default_factory=list)
    content_type: ContentType = ContentType.GENERAL
    key_phrases: list[str] = field(default_factory=list)
    readability: float = 0.0
    word_count: int = 0
    original_length: int = 0
    diagnostics: DigestDiagnostics = field(default_factory=DigestDiagnostics)

    @property
    def compression_ratio(self) -> float:
        """Summary length relative to the transcript (0.0 for an empty transcript)."""
        if self.original_length == 0:
            return 0.0
        return len(self.summary) / self.original_length

    @property
    def overall_confidence(self) -> float:
        """Mean of the task, reminder and title confidences; an empty list counts as 0.5."""
        def mean(items) -> float:
            if not items:
                return 0.5
            return sum(item.confidence for item in items) / len(items)

        return (mean(self.tasks) + mean(self.reminders) + mean(self.titles)) / 3

    @property
    def quality_description(self) -> str:
        confidence = self.overall_confidence
        if confidence >= 0.8:
            return "High Quality"
        if confidence >= 0.6:
            return "Good Quality"
        if confidence >= 0.4:
            return "Fair Quality"
        return "Low Quality"
