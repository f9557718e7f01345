"""
Tests for transcript validation.
"""

import pytest

from conftest import CLEAN_TEXT
from transcript_digest.errors import (
    EmptyTranscriptError,
    InsufficientContentError,
    TranscriptTooLongError,
    TranscriptTooShortError,
)
from transcript_digest.validation import (
    error_word_ratio,
    find_placeholder,
    is_repetitive,
    validate_transcript,
)


class TestHardFailures:
    """Each failure raises its own TranscriptValidationError subclass."""

    @pytest.mark.parametrize("text", ["", "   \n\t "])
    def test_empty(self, text):
        with pytest.raises(EmptyTranscriptError):
            validate_transcript(text)

    def test_mostly_error_messages(self):
        text = "Request failed with error timeout again " * 12
        with pytest.raises(InsufficientContentError, match="error"):
            validate_transcript(text)

    def test_placeholder_text(self):
        with pytest.raises(InsufficientContentError, match="placeholder"):
            validate_transcript("Transcription in progress. " + CLEAN_TEXT)

    def test_too_few_meaningful_words(self):
        with pytest.raises(TranscriptTooShortError) as exc_info:
            validate_transcript("a " * 60)
        assert exc_info.value.word_count == 0

    def test_too_long(self):
        with pytest.raises(TranscriptTooLongError) as exc_info:
            validate_transcript("word " * 101, max_words=100)
        assert exc_info.value.word_count == 101
        assert exc_info.value.recovery_suggestion


class TestAcceptedTranscripts:

    def test_short_text_used_as_is(self):
        result = validate_transcript("Hello there")
        assert result.is_short
        assert result.word_count == 2
        assert result.warnings == []

    def test_short_text_skips_content_checks(self):
        """Even an error-looking short note is accepted."""
        assert validate_transcript("error failed timeout").is_short

    def test_clean_text(self):
        result = validate_transcript(CLEAN_TEXT)
        assert not result.is_short
        assert result.word_count == 60
        assert result.warnings == []

    def test_loading_in_normal_speech(self):
        text = "We spent the morning loading the truck. " + CLEAN_TEXT
        assert validate_transcript(text).word_count == 67


class TestWarnings:

    def test_long_and_repetitive(self, technical_transcript):
        warnings = validate_transcript(technical_transcript).warnings
        assert any("Long transcript" in w for w in warnings)
        assert any("repetitive" in w for w in warnings)

    def test_filler_words(self):
        text = "So um we uh went to the store and um bought some bread today " * 5
        warnings = validate_transcript(text).warnings
        assert any("filler" in w for w in warnings)


class TestHelpers:

    def test_error_word_ratio(self):
        assert error_word_ratio([]) == 0.0
        assert error_word_ratio(["Timeout", "during", "upload", "failed"]) == 0.5

    def test_find_placeholder(self):
        assert find_placeholder("Loading transcription now") == "loading transcription"
        assert find_placeholder("We were loading the truck") is None

    def test_is_repetitive(self):
        assert not is_repetitive("Same. Same. Same.")
        assert is_repetitive("Same. Same. Same. Same. Other.")
        assert not is_repetitive(CLEAN_TEXT)
