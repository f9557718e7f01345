"""
Transcript validation.

Runs before any classification or extraction. Hard failures raise a
TranscriptValidationError subclass; soft issues are returned as warnings
that end up in the digest diagnostics.
"""

import re
from dataclasses import dataclass, field

from transcript_digest.analysis.text_utils import split_raw_sentences
from transcript_digest.config import (
    ERROR_WORD_RATIO_LIMIT,
    LONG_TRANSCRIPT_WARNING_WORDS,
    MAX_TRANSCRIPT_WORDS,
    MIN_TRANSCRIPT_WORDS,
    SHORT_TEXT_WORD_LIMIT,
)
from transcript_digest.errors import (
    EmptyTranscriptError,
    InsufficientContentError,
    TranscriptTooLongError,
    TranscriptTooShortError,
)
from transcript_digest.logging_config import debug_log

# Text that a transcription service emits instead of a transcript
PLACEHOLDER_PATTERNS = [
    "transcription in progress",
    "processing audio",
    "please wait",
    "transcribing",
    "failed to transcribe",
    "no audio detected",
    "silence detected",
    "transcription coming soon",
]

# "loading" alone is common in real speech; only these phrasings are placeholders
LOADING_PLACEHOLDERS = [
    "loading transcription",
    "loading audio",
    "loading file",
    "loading please wait",
    "loading...",
    "loading -",
    "loading:",
]

ERROR_WORD_FRAGMENTS = ["error", "failed", "exception", "timeout"]

LOW_QUALITY_PATTERN = re.compile(r"\b(?:um|uh|like|you know)\b|\[inaudible\]|\[unclear\]|\.\.\.")
LOW_QUALITY_RATIO_LIMIT = 0.1
REPETITION_UNIQUE_RATIO = 0.7


@dataclass
class ValidationResult:
    word_count: int
    is_short: bool = False
    warnings: list[str] = field(default_factory=list)


def error_word_ratio(words: list[str]) -> float:
    """Share of words containing error/failed/exception/timeout."""
    if not words:
        return 0.0
    hits = sum(1 for word in words if any(fragment in word.lower() for fragment in ERROR_WORD_FRAGMENTS))
    return hits / len(words)


def find_placeholder(text: str) -> str | None:
    lowered = text.lower()
    for pattern in PLACEHOLDER_PATTERNS:
        if pattern in lowered:
            return pattern
    for pattern in LOADING_PLACEHOLDERS:
        if pattern in lowered:
            return pattern
    return None


def is_repetitive(text: str) -> bool:
    sentences = split_raw_sentences(text)
    if len(sentences) <= 3:
        return False
    unique = {sentence.lower() for sentence in sentences}
    return len(unique) / len(sentences) < REPETITION_UNIQUE_RATIO


def has_low_quality_markers(text: str, word_count: int) -> bool:
    if word_count == 0:
        return False
    markers = len(LOW_QUALITY_PATTERN.findall(text.lower()))
    return markers / word_count > LOW_QUALITY_RATIO_LIMIT


def validate_transcript(text: str,
                        min_words: int = MIN_TRANSCRIPT_WORDS,
                        max_words: int = MAX_TRANSCRIPT_WORDS) -> ValidationResult:
    """
    Validate a transcript before processing.

    Transcripts of 50 words or fewer are always valid and are used as-is.

    Returns:
        ValidationResult with the word count and any warnings

    Raises:
        EmptyTranscriptError: Empty or whitespace-only text
        InsufficientContentError: Placeholder text or mostly error messages
        TranscriptTooShortError: Fewer than min_words meaningful words
        TranscriptTooLongError: More than max_words words
    """
    if not text or not text.strip():
        raise EmptyTranscriptError()

    words = text.split()
    word_count = len(words)
    if word_count <= SHORT_TEXT_WORD_LIMIT:
        debug_log(f"[Validation] {word_count} words - short transcript, used as-is")
        return ValidationResult(word_count=word_count, is_short=True)

    meaningful = [word for word in words if len(word) > 1]
    ratio = error_word_ratio(meaningful)
    if ratio > ERROR_WORD_RATIO_LIMIT:
        raise InsufficientContentError(
            f"Transcript looks like an error message ({ratio:.0%} of words are error terms)."
        )

    placeholder = find_placeholder(text)
    if placeholder:
        raise InsufficientContentError(f"Transcript contains placeholder text: '{placeholder}'.")

    if len(meaningful) < min_words:
        raise TranscriptTooShortError(len(meaningful), min_words)
    if word_count > max_words:
        raise TranscriptTooLongError(word_count, max_words)

    result = ValidationResult(word_count=word_count)
    if word_count > LONG_TRANSCRIPT_WARNING_WORDS:
        result.warnings.append(
            f"Long transcript ({word_count} words); processing may take several minutes."
        )
    if is_repetitive(text):
        result.warnings.append("Content appears repetitive; summary quality may be affected.")
    if has_low_quality_markers(text, word_count):
        result.warnings.append("Transcript contains many filler words or unclear passages.")

    debug_log(f"[Validation] {word_count} words passed with {len(result.warnings)} warnings")
    return result
