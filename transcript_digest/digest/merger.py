"""
Chunk Result Merger

Combines per-chunk results into one result for the whole transcript:
- summaries are condensed into a meta-summary by the engine, in batches
  when the joined text is too large for one call
- tasks, reminders and titles are deduplicated across chunks with a
  stricter similarity threshold than within a chunk, then ranked and capped
- the content type is a majority vote over chunks

Input order does not matter: results are re-sorted by sequence first, so a
parallel run that completes chunks out of order merges identically.
"""

from collections import Counter

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.analysis.insights import MAX_KEY_PHRASES
from transcript_digest.analysis.tokens import estimate_tokens
from transcript_digest.config import (
    CROSS_CHUNK_SIMILARITY_THRESHOLD,
    MAX_TOKENS_FOR_FINAL_SUMMARY,
    MERGED_ITEM_LIMIT,
)
from transcript_digest.digest.result_types import ChunkResult
from transcript_digest.engines.base import SummarizationEngine
from transcript_digest.extraction.consolidation import (
    consolidate_reminders,
    consolidate_tasks,
    consolidate_titles,
    rank_reminders,
    rank_tasks,
    rank_titles,
)
from transcript_digest.logging_config import debug_log, error

SUMMARY_SEPARATOR = "\n\n"


def majority_content_type(results: list[ChunkResult]) -> ContentType:
    """Most common content type; ties go to the type seen first."""
    if not results:
        return ContentType.GENERAL
    counts = Counter(result.content_type for result in results)
    # Counter preserves first-insertion order, and max() keeps the first of equal counts
    return max(counts, key=lambda content_type: counts[content_type])


def merge_key_phrases(phrase_lists: list[list[str]], limit: int = MAX_KEY_PHRASES) -> list[str]:
    """Phrases ranked by how many chunks mention them, then by first appearance."""
    counts: Counter[str] = Counter()
    display: dict[str, str] = {}
    for phrases in phrase_lists:
        for phrase in dict.fromkeys(phrases):
            key = phrase.lower()
            counts[key] += 1
            display.setdefault(key, phrase)
    return [display[key] for key, _ in counts.most_common(limit)]


class ChunkMerger:
    """
    Merges chunk results produced by one engine.

    Args:
        engine: Engine used for the meta-summary
        similarity_threshold: Cross-chunk deduplication threshold
        item_limit: Maximum tasks, reminders and titles in the merged result
        summary_token_limit: Largest joined summary sent in one summarize call
    """

    def __init__(self, engine: SummarizationEngine,
                 similarity_threshold: float = CROSS_CHUNK_SIMILARITY_THRESHOLD,
                 item_limit: int = MERGED_ITEM_LIMIT,
                 summary_token_limit: int = MAX_TOKENS_FOR_FINAL_SUMMARY):
        self.engine = engine
        self.similarity_threshold = similarity_threshold
        self.item_limit = item_limit
        self.summary_token_limit = summary_token_limit

    def merge(self, indexed_results: list[tuple[int, ChunkResult]]) -> ChunkResult:
        """
        Merge (sequence, result) pairs from successful chunks.

        Returns:
            Combined ChunkResult. With no input the summary is empty, the
            lists are empty and the content type is GENERAL.
        """
        ordered = [result for _, result in sorted(indexed_results, key=lambda pair: pair[0])]
        if not ordered:
            return ChunkResult(summary="")

        content_type = majority_content_type(ordered)
        tasks = [task for result in ordered for task in result.tasks]
        reminders = [reminder for result in ordered for reminder in result.reminders]
        titles = [title for result in ordered for title in result.titles]

        merged = ChunkResult(
            summary=self.merge_summaries([result.summary for result in ordered], content_type),
            tasks=rank_tasks(consolidate_tasks(tasks, self.similarity_threshold), self.item_limit),
            reminders=rank_reminders(
                consolidate_reminders(reminders, self.similarity_threshold, match_time_text=False),
                self.item_limit,
            ),
            titles=rank_titles(consolidate_titles(titles, self.similarity_threshold), self.item_limit),
            content_type=content_type,
            key_phrases=merge_key_phrases([result.key_phrases for result in ordered]),
            processing_time=sum(result.processing_time for result in ordered),
        )
        debug_log(
            f"[Merger] Merged {len(ordered)} chunks: {len(tasks)}->{len(merged.tasks)} tasks, "
            f"{len(reminders)}->{len(merged.reminders)} reminders, {len(titles)}->{len(merged.titles)} titles, "
            f"type={content_type.value}"
        )
        return merged

    def merge_summaries(self, summaries: list[str], content_type: ContentType) -> str:
        """
        Condense chunk summaries into one.

        A single summary is returned unchanged. When the joined summaries
        exceed the token limit they are summarized in batches and the batch
        summaries are merged again.
        """
        summaries = [summary.strip() for summary in summaries if summary and summary.strip()]
        if not summaries:
            return ""
        if len(summaries) == 1:
            return summaries[0]

        joined = SUMMARY_SEPARATOR.join(summaries)
        if estimate_tokens(joined) <= self.summary_token_limit:
            return self._summarize(joined, content_type)

        batches = self._batch(summaries)
        if len(batches) == len(summaries):
            # Every summary is already too large to pair up; no further reduction possible
            return self._summarize(joined, content_type)

        debug_log(f"[Merger] Summarizing {len(summaries)} summaries in {len(batches)} batches")
        intermediate = [
            self._summarize(SUMMARY_SEPARATOR.join(batch), content_type) if len(batch) > 1 else batch[0]
            for batch in batches
        ]
        return self.merge_summaries(intermediate, content_type)

    def _batch(self, summaries: list[str]) -> list[list[str]]:
        """Group consecutive summaries so each group fits the token limit."""
        batches: list[list[str]] = []
        current: list[str] = []
        current_tokens = 0
        for summary in summaries:
            tokens = estimate_tokens(summary)
            if current and current_tokens + tokens > self.summary_token_limit:
                batches.append(current)
                current, current_tokens = [], 0
            current.append(summary)
            current_tokens += tokens
        if current:
            batches.append(current)
        return batches

    def _summarize(self, text: str, content_type: ContentType) -> str:
        try:
            summary = self.engine.summarize(text, content_type).strip()
        except Exception as e:
            error(f"[Merger] Meta-summary generation failed: {e}")
            return text
        return summary or text
