"""
Tests for token-budgeted chunking and chunk plan validation.
"""

from dataclasses import replace

import pytest

from conftest import sectioned_transcript
from transcript_digest.analysis.tokens import estimate_tokens, needs_chunking
from transcript_digest.digest.chunker import TranscriptChunker, validate_chunk_plan
from transcript_digest.errors import ChunkBoundaryError


def assert_tiles(chunks, text):
    assert "".join(chunk.text for chunk in chunks) == text
    for chunk in chunks:
        assert text[chunk.start_char:chunk.end_char] == chunk.text


class TestChunking:
    """Test how text is split."""

    def test_short_text_is_one_chunk(self):
        text = "Hello there. How are you?"
        chunks = TranscriptChunker(max_tokens=100).chunk(text)
        assert len(chunks) == 1
        assert chunks[0].text == text
        assert chunks[0].sequence == 0

    def test_empty_text(self):
        assert TranscriptChunker(max_tokens=100).chunk("") == []

    def test_paragraph_boundaries(self):
        text = sectioned_transcript()
        chunks = TranscriptChunker(max_tokens=60).chunk(text)

        assert len(chunks) == 3
        assert_tiles(chunks, text)
        assert [c.sequence for c in chunks] == [0, 1, 2]
        assert all(c.token_count <= 60 for c in chunks)
        assert "alpha" in chunks[0].text and "bravo" in chunks[1].text

    def test_oversized_sentence_splits_on_whitespace(self):
        text = "word " * 100
        chunks = TranscriptChunker(max_tokens=20).chunk(text)

        assert len(chunks) > 1
        assert_tiles(chunks, text)
        assert all(c.token_count <= 20 for c in chunks)
        assert all(not c.text.startswith(" ") for c in chunks)

    def test_oversized_word_is_hard_split(self):
        text = "#" * 30
        chunks = TranscriptChunker(max_tokens=10).chunk(text)

        assert len(chunks) > 1
        assert_tiles(chunks, text)
        assert all(c.token_count <= 10 for c in chunks)

    def test_large_technical_transcript_needs_several_chunks(self, technical_transcript):
        chunks = TranscriptChunker().chunk(technical_transcript)
        assert len(chunks) >= 2
        assert_tiles(chunks, technical_transcript)

    def test_plan_passes_validation(self, technical_transcript):
        chunker = TranscriptChunker(max_tokens=500)
        chunks = chunker.chunk(technical_transcript)
        validate_chunk_plan(chunks, technical_transcript, 500)

    def test_time_estimates(self):
        text = sectioned_transcript()
        chunks = TranscriptChunker(max_tokens=60, words_per_minute=150).chunk(text)

        # Each section is 40 words, 0.4 seconds per word
        assert chunks[0].start_time_estimate == 0.0
        assert chunks[1].start_time_estimate == pytest.approx(16.0)
        assert chunks[1].end_time_estimate == pytest.approx(32.0)

    def test_minimum_budget(self):
        with pytest.raises(ValueError):
            TranscriptChunker(max_tokens=3)


class TestValidateChunkPlan:
    """Each kind of broken plan is rejected."""

    TEXT = sectioned_transcript()

    @pytest.fixture
    def chunks(self):
        return TranscriptChunker(max_tokens=60).chunk(self.TEXT)

    def test_empty_plan(self):
        with pytest.raises(ChunkBoundaryError):
            validate_chunk_plan([], self.TEXT, 60)

    def test_gap_between_chunks(self, chunks):
        chunks[1] = replace(chunks[1], start_char=chunks[1].start_char + 1, text=chunks[1].text[1:])
        with pytest.raises(ChunkBoundaryError, match="should start at"):
            validate_chunk_plan(chunks, self.TEXT, 60)

    def test_wrong_sequence(self, chunks):
        chunks[2] = replace(chunks[2], sequence=5)
        with pytest.raises(ChunkBoundaryError, match="sequence"):
            validate_chunk_plan(chunks, self.TEXT, 60)

    def test_text_mismatch(self, chunks):
        chunks[0] = replace(chunks[0], text=chunks[0].text.upper())
        with pytest.raises(ChunkBoundaryError, match="does not match"):
            validate_chunk_plan(chunks, self.TEXT, 60)

    def test_over_budget(self, chunks):
        with pytest.raises(ChunkBoundaryError, match="over the budget"):
            validate_chunk_plan(chunks, self.TEXT, 30)

    def test_incomplete_coverage(self, chunks):
        with pytest.raises(ChunkBoundaryError, match="Chunks end at"):
            validate_chunk_plan(chunks[:-1], self.TEXT, 60)


class TestTokenEstimates:
    """Test the token estimate that decides between direct and chunked runs."""

    def test_estimate_counts_words_punctuation_and_sentences(self):
        # 5 words, 2 punctuation marks, 3 sentence pieces
        assert estimate_tokens("Hello there. How are you?") == 10

    def test_empty_text_is_one_token(self):
        assert estimate_tokens("") == 1

    def test_needs_chunking_above_budget_only(self):
        text = "Hello there. How are you?"
        assert not needs_chunking(text, 10)
        assert needs_chunking(text, 9)

    def test_sectioned_transcript_exceeds_a_section_budget(self):
        assert needs_chunking(sectioned_transcript(), 60)
