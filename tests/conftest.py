"""
Shared fixtures for the TranscriptDigest tests.

The fake tagger keeps extraction tests independent of downloaded NLTK
models: known action verbs are tagged as verbs, capitalized words as
proper nouns and everything else as common nouns.
"""

import re
import threading

import pytest

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.digest.result_types import ChunkResult
from transcript_digest.engines.base import SummarizationEngine
from transcript_digest.errors import EngineResponseError
from transcript_digest.extraction.models import Priority, TaskCategory, TaskItem
from transcript_digest.extraction.tagger import Tagger
from transcript_digest.extraction.task_extractor import ACTION_VERBS

_TOKEN = re.compile(r"[\w']+|[^\w\s]")


class FakeTagger(Tagger):
    def tag(self, sentence: str) -> list[tuple[str, str]]:
        tagged = []
        for token in _TOKEN.findall(sentence):
            if token.lower() in ACTION_VERBS:
                tagged.append((token, "VB"))
            elif not token[0].isalnum():
                tagged.append((token, "."))
            elif token[0].isupper():
                tagged.append((token, "NNP"))
            else:
                tagged.append((token, "NN"))
        return tagged


class ScriptedEngine(SummarizationEngine):
    """
    Deterministic engine for orchestrator tests.

    Each chunk yields one task named after the first marker word found in
    it. Chunks containing a word in fail_markers raise on every attempt;
    markers in flaky_markers fail only on their first attempt.
    """

    name = "scripted"
    version = "1.0"

    def __init__(self, max_input_tokens: int = 60, fail_markers=(), flaky_markers=(),
                 timeout_seconds=None, content_types=None, delay=0.0):
        super().__init__(max_input_tokens=max_input_tokens, timeout_seconds=timeout_seconds)
        self.fail_markers = set(fail_markers)
        self.flaky_markers = set(flaky_markers)
        self.content_types = content_types or {}
        self.delay = delay
        self.calls: list[str] = []
        self.summarize_calls: list[str] = []
        self._lock = threading.Lock()
        self._seen_flaky: set[str] = set()

    def marker(self, text: str) -> str:
        for word in MARKERS:
            if word in text:
                return word
        return "whole"

    def process_complete(self, text: str) -> ChunkResult:
        marker = self.marker(text)
        with self._lock:
            self.calls.append(marker)
        if self.delay:
            threading.Event().wait(self.delay)
        if marker in self.fail_markers:
            raise EngineResponseError(f"engine rejected {marker}")
        with self._lock:
            if marker in self.flaky_markers and marker not in self._seen_flaky:
                self._seen_flaky.add(marker)
                raise EngineResponseError(f"transient failure on {marker}")
        return ChunkResult(
            summary=f"Summary of {marker}",
            tasks=[TaskItem(f"Handle the {marker} section.", Priority.MEDIUM, TaskCategory.GENERAL, 0.8)],
            content_type=self.content_types.get(marker, ContentType.GENERAL),
            key_phrases=[marker.title()],
        )

    def summarize(self, text: str, content_type: ContentType) -> str:
        self.summarize_calls.append(text)
        return " | ".join(part.strip() for part in text.split("\n\n"))


MARKERS = ["alpha", "bravo", "charlie", "delta", "echo"]


def sectioned_transcript(markers=("alpha", "bravo", "charlie")) -> str:
    """One paragraph per marker, each about 50 estimated tokens."""
    paragraphs = []
    for marker in markers:
        sentences = [f"Section {marker} covers point number {n} in detail." for n in range(1, 6)]
        paragraphs.append(" ".join(sentences))
    return "\n\n".join(paragraphs)


CLEAN_TEXT = (
    "The quarterly planning session opened with a review of last year's results. "
    "Maria presented the hiring plan for the support team and answered several questions. "
    "Engineering leads described the migration schedule and the main risks they expect. "
    "Finance asked for a revised travel budget before the end of the month. "
    "Everyone agreed to meet again after the numbers are updated."
)


TECHNICAL_SENTENCES = (
    "The server calls client.connect() on version 2.4.1 via https://example.com/docs "
    "and the database module logs an exception. "
    "Each request returns a response object with status code 200 after the framework runs the algorithm. "
    "Deployment to production uses the cache layer at 10.0.0.12 for better performance. "
)


@pytest.fixture
def fake_tagger():
    return FakeTagger()


@pytest.fixture
def technical_transcript():
    """Roughly 20,000 words of engineering discussion."""
    return TECHNICAL_SENTENCES * 455


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested delays."""
    calls = []

    def sleep(seconds):
        calls.append(seconds)

    sleep.calls = calls
    return sleep
