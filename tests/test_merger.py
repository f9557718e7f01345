"""
Tests for merging chunk results.
"""

from conftest import MARKERS, ScriptedEngine
from transcript_digest.analysis.content_type import ContentType
from transcript_digest.digest.merger import ChunkMerger
from transcript_digest.digest.result_types import ChunkResult
from transcript_digest.extraction.models import ReminderItem, TimeReference, Urgency


def chunk_results(markers=MARKERS):
    engine = ScriptedEngine()
    return [(i, engine.process_complete(f"Section {m}")) for i, m in enumerate(markers)]


class FailingSummaryEngine(ScriptedEngine):
    def summarize(self, text, content_type):
        raise RuntimeError("model crashed")


class TestMetaSummary:
    """Test summary condensation and batching."""

    def test_single_summary_unchanged(self):
        engine = ScriptedEngine()
        assert ChunkMerger(engine).merge_summaries(["Only one."], ContentType.GENERAL) == "Only one."
        assert engine.summarize_calls == []

    def test_blank_summaries_dropped(self):
        merger = ChunkMerger(ScriptedEngine())
        assert merger.merge_summaries(["", "   "], ContentType.GENERAL) == ""

    def test_one_call_when_summaries_fit(self):
        engine = ScriptedEngine()
        summary = ChunkMerger(engine).merge_summaries(["First part", "Second part"], ContentType.GENERAL)
        assert summary == "First part | Second part"
        assert engine.summarize_calls == ["First part\n\nSecond part"]

    def test_batches_when_summaries_do_not_fit(self):
        engine = ScriptedEngine()
        merger = ChunkMerger(engine, summary_token_limit=10)
        summaries = [f"Summary of {marker}" for marker in MARKERS]

        summary = merger.merge_summaries(summaries, ContentType.GENERAL)

        assert summary == " | ".join(summaries)
        # Two pair batches, then one final call over the batch summaries
        assert len(engine.summarize_calls) == 3

    def test_engine_failure_falls_back_to_joined_text(self):
        merger = ChunkMerger(FailingSummaryEngine())
        assert merger.merge_summaries(["First part", "Second part"], ContentType.GENERAL) == (
            "First part\n\nSecond part"
        )


class TestMerge:

    def test_empty_input(self):
        merged = ChunkMerger(ScriptedEngine()).merge([])
        assert merged.summary == ""
        assert merged.tasks == []
        assert merged.content_type is ContentType.GENERAL

    def test_input_order_does_not_matter(self):
        results = chunk_results()
        merger = ChunkMerger(ScriptedEngine())
        assert merger.merge(list(reversed(results))) == merger.merge(results)

    def test_item_limit(self):
        merged = ChunkMerger(ScriptedEngine(), item_limit=2).merge(chunk_results())
        assert len(merged.tasks) == 2

    def test_processing_time_summed(self):
        first = ChunkResult(summary="a", processing_time=1.5)
        second = ChunkResult(summary="b", processing_time=2.0)
        assert ChunkMerger(ScriptedEngine()).merge([(0, first), (1, second)]).processing_time == 3.5

    def test_reminders_from_different_chunks_need_similar_text(self):
        """Sharing only a time phrase is not enough across chunks."""
        tomorrow = TimeReference("tomorrow")
        first = ChunkResult(summary="a", reminders=[ReminderItem("Renew the passport", tomorrow, Urgency.THIS_WEEK, 0.9)])
        second = ChunkResult(summary="b", reminders=[ReminderItem("Dentist at noon", tomorrow, Urgency.TODAY, 0.8)])

        merged = ChunkMerger(ScriptedEngine()).merge([(0, first), (1, second)])
        assert len(merged.reminders) == 2
        assert merged.reminders[0].text == "Dentist at noon"
