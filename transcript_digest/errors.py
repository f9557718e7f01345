"""
Error types raised by the digest pipeline.

Every error carries a user-facing description and a recovery suggestion so
callers can decide whether to retry the whole run, trim the input, or fix
engine configuration.

Propagation:
    TranscriptValidationError - raised before any processing starts
    EngineError               - absorbed per chunk (retried, then skipped);
                                propagated on the single-call path
    ChunkBoundaryError        - malformed chunk plan, aborts the run
    ProcessingCancelledError  - the caller cancelled the run
"""


class DigestError(Exception):
    """Base class for all pipeline errors."""

    recovery_suggestion = "Try processing the transcript again."

    def __init__(self, description: str, recovery_suggestion: str | None = None):
        super().__init__(description)
        self.description = description
        if recovery_suggestion is not None:
            self.recovery_suggestion = recovery_suggestion


# =============================================================================
# Input validation
# =============================================================================

class TranscriptValidationError(DigestError, ValueError):
    """Transcript rejected before classification or extraction ran."""


class EmptyTranscriptError(TranscriptValidationError):
    recovery_suggestion = "Record or provide a transcript with spoken content."

    def __init__(self):
        super().__init__("Transcript is empty.")


class TranscriptTooShortError(TranscriptValidationError):
    recovery_suggestion = "Provide a longer transcript with more content to summarize."

    def __init__(self, word_count: int, min_words: int):
        super().__init__(
            f"Transcript is too short to summarize ({word_count} words, minimum {min_words})."
        )
        self.word_count = word_count
        self.min_words = min_words


class TranscriptTooLongError(TranscriptValidationError):
    recovery_suggestion = "Split the transcript into smaller recordings and process them separately."

    def __init__(self, word_count: int, max_words: int):
        super().__init__(
            f"Transcript is too long for processing ({word_count} words, maximum {max_words})."
        )
        self.word_count = word_count
        self.max_words = max_words


class InsufficientContentError(TranscriptValidationError):
    recovery_suggestion = "Wait for transcription to finish, or check that the recording contains speech."

    def __init__(self, reason: str = "Transcript does not contain enough meaningful content."):
        super().__init__(reason)


# =============================================================================
# Engine failures
# =============================================================================

class EngineError(DigestError, RuntimeError):
    """An engine call failed. Retried per chunk, then the chunk is skipped."""

    recovery_suggestion = "Try again later; the run can be repeated once the engine recovers."


class EngineUnavailableError(EngineError):
    recovery_suggestion = "Check that the engine service is running and reachable."

    def __init__(self, service: str, detail: str = ""):
        message = f"{service} is currently unavailable."
        if detail:
            message = f"{message} {detail}"
        super().__init__(message)
        self.service = service


class EngineTimeoutError(EngineError):
    recovery_suggestion = "Try a shorter transcript or raise the engine timeout."

    def __init__(self, timeout_seconds: float):
        super().__init__(f"Engine call timed out after {timeout_seconds:g} seconds.")
        self.timeout_seconds = timeout_seconds


class EngineResponseError(EngineError):
    """The engine answered, but the response could not be used."""


# =============================================================================
# Contract violations and control flow
# =============================================================================

class ChunkBoundaryError(DigestError):
    recovery_suggestion = "This is a defect in chunk planning; report it with the transcript length."


class ProcessingCancelledError(DigestError):
    recovery_suggestion = "Start the run again when ready."

    def __init__(self):
        super().__init__("Processing was cancelled.")


class ConfigurationRequiredError(DigestError):
    recovery_suggestion = "Complete the engine configuration and try again."
