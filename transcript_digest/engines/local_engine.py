"""
Local heuristic engine.

Runs entirely in-process: the content classifier, the task, reminder and
title extractors, and an extractive summary built from the highest ranked
sentences. Useful offline and as the extraction half of remote engines.
"""

import time

from transcript_digest.analysis.classifier import ContentClassifier
from transcript_digest.analysis.content_type import ContentType
from transcript_digest.analysis.importance import sentence_importance
from transcript_digest.analysis.insights import extract_key_phrases, sentences_related
from transcript_digest.analysis.text_utils import split_raw_sentences
from transcript_digest.config import SHORT_TEXT_WORD_LIMIT, get_engine_config
from transcript_digest.digest.result_types import ChunkResult
from transcript_digest.engines.base import SummarizationEngine
from transcript_digest.extraction.reminder_extractor import ReminderExtractor
from transcript_digest.extraction.tagger import NltkTagger, Tagger
from transcript_digest.extraction.task_extractor import TaskExtractor
from transcript_digest.extraction.title_extractor import TitleExtractor
from transcript_digest.logging_config import debug_log, warning

MIN_SUMMARY_SENTENCE_CHARS = 20
AD_MARKERS = ["sponsored by", "this message comes from", "advertisement", "brought to you by"]


def _ranked_sentences(sentences: list[str], full_text: str, count: int) -> list[str]:
    """
    Top sentences by importance, returned in document order.

    A sentence closely related to one already chosen is passed over, so the
    summary does not repeat itself.
    """
    scored = sorted(
        ((sentence_importance(s, full_text), i) for i, s in enumerate(sentences)),
        key=lambda pair: (-pair[0], pair[1]),
    )
    chosen: list[int] = []
    for _, index in scored:
        if len(chosen) == count:
            break
        if any(sentences_related(sentences[index], sentences[other]) for other in chosen):
            continue
        chosen.append(index)
    return [sentences[i] for i in sorted(chosen)]


def extractive_summary(text: str) -> str:
    """
    Summary made of the transcript's own sentences.

    Transcripts of 50 words or fewer are returned as-is. Otherwise the
    number of sentences grows with length: one under 100 words, two under
    500, then bullet lists of 2-4 and 3-6 sentences.
    """
    stripped = text.strip()
    word_count = len(stripped.split())
    if word_count <= SHORT_TEXT_WORD_LIMIT:
        return stripped

    sentences = [s for s in split_raw_sentences(stripped) if len(s) > MIN_SUMMARY_SENTENCE_CHARS]
    # Sponsor reads tend to sit at the start of recordings
    sentences = [
        s for i, s in enumerate(sentences)
        if i >= 3 or not any(marker in s.lower() for marker in AD_MARKERS)
    ]
    if not sentences:
        return stripped

    if word_count < 100:
        return f"{sentences[0]}."
    if word_count < 500:
        return ". ".join(_ranked_sentences(sentences, stripped, 2)) + "."

    if word_count < 2000:
        count = min(4, max(2, len(sentences) // 3))
    else:
        count = min(6, max(3, len(sentences) // 5))
    return "\n".join(f"• {s}." for s in _ranked_sentences(sentences, stripped, count))


class LocalEngine(SummarizationEngine):
    """
    Heuristic engine backed by the in-process analyzers.

    Args:
        tagger: POS tagger shared by the extractors (defaults to NLTK)
        max_input_tokens: Overrides config/engines.yaml
        timeout_seconds: Overrides config/engines.yaml
    """

    name = "local-heuristic"
    version = "1.0"
    config_key = "local"

    def __init__(self, tagger: Tagger | None = None,
                 max_input_tokens: int | None = None,
                 timeout_seconds: float | None = None):
        config = get_engine_config(self.config_key)
        super().__init__(
            max_input_tokens=max_input_tokens or config.get('max_input_tokens'),
            timeout_seconds=timeout_seconds or config.get('timeout_seconds'),
        )
        self.tagger = tagger or NltkTagger()
        self.classifier = ContentClassifier()
        self.task_extractor = TaskExtractor(tagger=self.tagger)
        self.reminder_extractor = ReminderExtractor()
        self.title_extractor = TitleExtractor()

    def process_complete(self, text: str) -> ChunkResult:
        start = time.perf_counter()
        content_type, confidence = self.classifier.classify(text)
        result = ChunkResult(
            summary=self.summarize(text, content_type),
            tasks=self.task_extractor.extract(text),
            reminders=self.reminder_extractor.extract(text),
            titles=self.title_extractor.extract(text),
            content_type=content_type,
            key_phrases=self.key_phrases(text),
        )
        result.processing_time = time.perf_counter() - start
        debug_log(
            f"[{self.__class__.__name__}] Processed {len(text.split())} words as {content_type.value} "
            f"({confidence:.2f}): {len(result.tasks)} tasks, {len(result.reminders)} reminders, "
            f"{len(result.titles)} titles in {result.processing_time:.2f}s"
        )
        return result

    def summarize(self, text: str, content_type: ContentType) -> str:
        return extractive_summary(text)

    def key_phrases(self, text: str) -> list[str]:
        try:
            return extract_key_phrases(text, self.tagger)
        except LookupError as e:
            warning(f"[{self.__class__.__name__}] Tagger data unavailable, skipping key phrases: {e}")
            return []
