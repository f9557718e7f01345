"""
Transcript Chunker

Splits an oversized transcript into contiguous chunks whose estimated token
count fits an engine budget. Boundaries are chosen in order of preference:

1. Paragraph breaks (blank lines)
2. Sentence ends (. ! ? followed by whitespace)
3. Whitespace between words, for sentences that alone exceed the budget
4. A hard cut inside a word, only for a single word larger than the budget

Every chunk is an exact slice of the original text and the chunks cover it
end to end, so chunk boundaries can be checked mechanically before any
engine call is made.
"""

import re
from dataclasses import dataclass

from transcript_digest.analysis.tokens import estimate_tokens
from transcript_digest.config import MAX_TOKENS_PER_CHUNK, WORDS_PER_MINUTE
from transcript_digest.errors import ChunkBoundaryError
from transcript_digest.logging_config import debug_log

_PARAGRAPH_BREAK = re.compile(r"\n[ \t]*\n\s*")
_SENTENCE_END = re.compile(r"[.!?]+\s+")
_WORD_WITH_SPACE = re.compile(r"\S+\s*|\s+")


@dataclass
class TranscriptChunk:
    """
    A token-bounded slice of a transcript.

    Attributes:
        sequence: Position of the chunk, 0-based and contiguous
        text: original[start_char:end_char]
        start_char: Offset of the first character in the original text
        end_char: Offset one past the last character
        token_count: Estimated tokens for this chunk's text
        start_time_estimate: Seconds into the recording where the chunk begins
        end_time_estimate: Seconds into the recording where the chunk ends
    """
    sequence: int
    text: str
    start_char: int
    end_char: int
    token_count: int
    start_time_estimate: float = 0.0
    end_time_estimate: float = 0.0

    @property
    def word_count(self) -> int:
        return len(self.text.split())


def _spans_between(text: str, start: int, end: int, pattern: re.Pattern) -> list[tuple[int, int]]:
    """Cut [start, end) after every match of pattern."""
    spans = []
    cursor = start
    for match in pattern.finditer(text, start, end):
        if match.end() > cursor:
            spans.append((cursor, match.end()))
            cursor = match.end()
    if cursor < end:
        spans.append((cursor, end))
    return spans


class TranscriptChunker:
    """
    Token-budgeted, boundary-aware splitter.

    Args:
        max_tokens: Upper bound on each chunk's estimated token count
        words_per_minute: Speaking rate used for the time estimates
    """

    def __init__(self, max_tokens: int = MAX_TOKENS_PER_CHUNK, words_per_minute: int = WORDS_PER_MINUTE):
        if max_tokens < 4:
            raise ValueError(f"max_tokens must be at least 4, got {max_tokens}")
        self.max_tokens = max_tokens
        self.words_per_minute = words_per_minute

    def chunk(self, text: str) -> list[TranscriptChunk]:
        """
        Split text into chunks.

        Returns:
            Chunks in order; a single chunk when the text already fits.
        """
        if not text:
            return []

        units = self._split_units(text)
        chunks = []
        chunk_start = units[0][0]
        chunk_tokens = 0

        for start, end in units:
            unit_tokens = estimate_tokens(text[start:end])
            # Summed unit estimates never undercount the joined text
            if chunk_tokens and chunk_tokens + unit_tokens > self.max_tokens:
                chunks.append(self._make_chunk(text, len(chunks), chunk_start, start))
                chunk_start = start
                chunk_tokens = 0
            chunk_tokens += unit_tokens

        chunks.append(self._make_chunk(text, len(chunks), chunk_start, len(text)))

        debug_log(
            f"[Chunker] Split {len(text.split()):,} words into {len(chunks)} chunks "
            f"(max {self.max_tokens} tokens each)"
        )
        return chunks

    def _split_units(self, text: str) -> list[tuple[int, int]]:
        units = []
        for para in _spans_between(text, 0, len(text), _PARAGRAPH_BREAK):
            if self._fits(text, para):
                units.append(para)
                continue
            for sentence in _spans_between(text, para[0], para[1], _SENTENCE_END):
                if self._fits(text, sentence):
                    units.append(sentence)
                else:
                    units.extend(self._split_sentence(text, sentence))
        return units

    def _fits(self, text: str, span: tuple[int, int]) -> bool:
        return estimate_tokens(text[span[0]:span[1]]) <= self.max_tokens

    def _split_sentence(self, text: str, span: tuple[int, int]) -> list[tuple[int, int]]:
        """Group words of an oversized sentence into budget-sized pieces."""
        pieces = []
        piece_start = None
        piece_tokens = 0

        for word in _spans_between(text, span[0], span[1], _WORD_WITH_SPACE):
            word_tokens = estimate_tokens(text[word[0]:word[1]])
            if word_tokens > self.max_tokens:
                if piece_start is not None:
                    pieces.append((piece_start, word[0]))
                    piece_start, piece_tokens = None, 0
                pieces.extend(self._hard_split(word))
                continue

            if piece_start is not None and piece_tokens + word_tokens > self.max_tokens:
                pieces.append((piece_start, word[0]))
                piece_start, piece_tokens = None, 0
            if piece_start is None:
                piece_start = word[0]
            piece_tokens += word_tokens

        if piece_start is not None:
            pieces.append((piece_start, span[1]))
        return pieces

    def _hard_split(self, span: tuple[int, int]) -> list[tuple[int, int]]:
        # Each character adds at most two tokens, plus two for the word itself
        size = max(1, (self.max_tokens - 2) // 2)
        return [(i, min(i + size, span[1])) for i in range(span[0], span[1], size)]

    def _make_chunk(self, text: str, sequence: int, start: int, end: int) -> TranscriptChunk:
        chunk_text = text[start:end]
        words_before = len(text[:start].split())
        words_through = words_before + len(chunk_text.split())
        seconds_per_word = 60.0 / self.words_per_minute
        return TranscriptChunk(
            sequence=sequence,
            text=chunk_text,
            start_char=start,
            end_char=end,
            token_count=estimate_tokens(chunk_text),
            start_time_estimate=words_before * seconds_per_word,
            end_time_estimate=words_through * seconds_per_word,
        )


def validate_chunk_plan(chunks: list[TranscriptChunk], text: str, max_tokens: int) -> None:
    """
    Check that chunks tile the text exactly and respect the budget.

    Raises:
        ChunkBoundaryError: On the first violation found
    """
    if not chunks:
        raise ChunkBoundaryError("Chunk plan is empty")

    expected_start = 0
    for index, chunk in enumerate(chunks):
        if chunk.sequence != index:
            raise ChunkBoundaryError(
                f"Chunk sequence {chunk.sequence} found at position {index}; sequences must be 0..{len(chunks) - 1}"
            )
        if chunk.start_char != expected_start or chunk.end_char <= chunk.start_char:
            raise ChunkBoundaryError(
                f"Chunk {index} spans [{chunk.start_char}, {chunk.end_char}) but should start at {expected_start}"
            )
        if text[chunk.start_char:chunk.end_char] != chunk.text:
            raise ChunkBoundaryError(f"Chunk {index} text does not match its span in the transcript")
        if chunk.token_count > max_tokens:
            raise ChunkBoundaryError(
                f"Chunk {index} has {chunk.token_count} tokens, over the budget of {max_tokens}"
            )
        expected_start = chunk.end_char

    if expected_start != len(text):
        raise ChunkBoundaryError(
            f"Chunks end at character {expected_start} but the transcript has {len(text)} characters"
        )
