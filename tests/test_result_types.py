"""
Tests for digest result types.
"""

import pytest

from transcript_digest.digest.result_types import ChunkOutcome, ChunkResult, ChunkState, Digest
from transcript_digest.extraction.models import (
    Priority,
    ReminderItem,
    TaskCategory,
    TaskItem,
    TimeReference,
    TitleItem,
    Urgency,
)


def task(confidence):
    return TaskItem("Call Bob.", Priority.MEDIUM, TaskCategory.CALL, confidence)


def reminder(confidence):
    return ReminderItem("Renew the passport", TimeReference("tomorrow"), Urgency.THIS_WEEK, confidence)


class TestChunkOutcome:

    def test_terminal_states(self):
        terminal = {state for state in ChunkState if state.is_terminal}
        assert terminal == {ChunkState.SUCCEEDED, ChunkState.FAILED}

    @pytest.mark.parametrize("state", [ChunkState.PENDING, ChunkState.ATTEMPTING, ChunkState.RETRYING])
    def test_outcome_requires_a_final_state(self, state):
        with pytest.raises(ValueError, match=state.value):
            ChunkOutcome(0, state)

    def test_failed_outcome_gets_a_default_message(self):
        outcome = ChunkOutcome(2, ChunkState.FAILED, attempts=3)
        assert outcome.error_message == "Chunk failed after all retry attempts"

    def test_succeeded_outcome_keeps_result(self):
        result = ChunkResult(summary="Summary")
        outcome = ChunkOutcome(0, ChunkState.SUCCEEDED, attempts=1, result=result)
        assert outcome.result is result
        assert outcome.error_message is None


class TestDigestMetrics:
    """Test compression ratio and quality labels."""

    def test_compression_ratio(self):
        digest = Digest(summary="x" * 25, original_length=100)
        assert digest.compression_ratio == pytest.approx(0.25)

    def test_compression_ratio_of_empty_transcript(self):
        assert Digest(summary="").compression_ratio == 0.0

    def test_empty_lists_count_as_half(self):
        digest = Digest(summary="Summary")
        assert digest.overall_confidence == pytest.approx(0.5)
        assert digest.quality_description == "Fair Quality"

    def test_high_quality(self):
        digest = Digest(summary="Summary", tasks=[task(1.0)], reminders=[reminder(0.95)],
                        titles=[TitleItem("Budget Review", 1.0)])
        assert digest.quality_description == "High Quality"

    def test_good_quality(self):
        digest = Digest(summary="Summary", tasks=[task(0.9)], titles=[TitleItem("Budget Review", 0.9)])
        assert digest.overall_confidence == pytest.approx(0.7667, abs=1e-3)
        assert digest.quality_description == "Good Quality"

    def test_low_quality(self):
        digest = Digest(summary="Summary", tasks=[task(0.1)], reminders=[reminder(0.1)],
                        titles=[TitleItem("Notes", 0.1)])
        assert digest.quality_description == "Low Quality"
