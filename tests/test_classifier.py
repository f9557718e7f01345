"""
Tests for content classification.

Covers the scorer registry, per-category scorers, the adaptive confidence
threshold and the classifier's choice between categories.
"""

import pytest

from transcript_digest.analysis.classifier import (
    ContentClassifier,
    classify,
    confidence_threshold,
    technical_density,
)
from transcript_digest.analysis.content_type import ContentType
from transcript_digest.analysis.scorers import (
    get_available_scorers,
    get_scorer,
    register_scorer,
    score_text,
)
from transcript_digest.analysis.scorers.base import BaseCategoryScorer
from transcript_digest.analysis.text_utils import count_words, normalize_for_scoring

MEETING_TEXT = (
    "Speaker 1 said the agenda has three items. Speaker 2 asked about the deadline for the project. "
    "John said we should follow up next week. Mary mentioned the action items. "
    "Let's discuss the decision. Any questions before the meeting adjourned?"
)

JOURNAL_TEXT = (
    "Today I feel grateful for my family. I think I learned a lot this week. "
    "Looking back, I realized my experience at work made me anxious but also excited. "
    "Tonight I am peaceful and happy."
)


def _score(content_type, text):
    return score_text(content_type, normalize_for_scoring(text), text)


class TestScorerRegistry:
    """Test registration and lookup of category scorers."""

    def test_builtin_scorers_registered_in_order(self):
        """Meeting, journal and technical are registered in that order."""
        assert get_available_scorers() == [
            ContentType.MEETING,
            ContentType.PERSONAL_JOURNAL,
            ContentType.TECHNICAL,
        ]

    def test_get_unknown_scorer_raises_key_error(self):
        """GENERAL has no scorer; the error lists what is available."""
        with pytest.raises(KeyError, match="meeting"):
            get_scorer(ContentType.GENERAL)

    def test_general_cannot_be_registered(self):
        """The fallback category is never scored."""
        with pytest.raises(ValueError):
            @register_scorer(ContentType.GENERAL)
            class GeneralScorer(BaseCategoryScorer):
                def base_score(self, text):
                    return 0.0

                def enhancements(self, text, original_text):
                    return 0.0

    def test_duplicate_registration_rejected(self):
        """A second scorer for the same category is an error."""
        get_available_scorers()
        with pytest.raises(ValueError):
            @register_scorer(ContentType.MEETING)
            class AnotherMeetingScorer(BaseCategoryScorer):
                def base_score(self, text):
                    return 0.0

                def enhancements(self, text, original_text):
                    return 0.0

    def test_score_text_for_general_is_zero(self):
        assert score_text(ContentType.GENERAL, "anything at all", "anything at all") == 0.0


class TestScorers:
    """Test individual category scores."""

    def test_scores_are_clamped_to_unit_interval(self):
        for content_type in get_available_scorers():
            text = MEETING_TEXT * 20
            score = score_text(content_type, normalize_for_scoring(text), text)
            assert 0.0 <= score <= 1.0

    def test_meeting_text_scores_highest_for_meeting(self):
        scores = {ct: _score(ct, MEETING_TEXT) for ct in get_available_scorers()}
        assert max(scores, key=scores.get) is ContentType.MEETING

    def test_journal_text_scores_highest_for_journal(self):
        scores = {ct: _score(ct, JOURNAL_TEXT) for ct in get_available_scorers()}
        assert max(scores, key=scores.get) is ContentType.PERSONAL_JOURNAL

    def test_empty_text_scores_zero(self):
        for content_type in get_available_scorers():
            assert score_text(content_type, "", "") == 0.0

    def test_fillers_removed_before_scoring(self):
        assert normalize_for_scoring("  um so   uh like you know the plan ") == "so the plan"

    def test_count_words_ignores_extra_whitespace(self):
        assert count_words("  the plan\n is  set ") == 4
        assert count_words("") == 0


class TestConfidenceThreshold:
    """Test the adaptive acceptance threshold."""

    def test_short_plain_text_uses_base_threshold(self):
        assert confidence_threshold("A short note about groceries.") == pytest.approx(0.3)

    def test_threshold_never_exceeds_maximum(self, technical_transcript):
        assert confidence_threshold(technical_transcript) == pytest.approx(0.6)

    def test_more_words_never_lower_threshold(self):
        sentence = "We walked along the river and talked about the weather. "
        previous = 0.0
        for repeats in (1, 5, 25, 50, 100):
            threshold = confidence_threshold(sentence * repeats)
            assert threshold >= previous
            previous = threshold

    def test_technical_density_raises_threshold(self):
        plain = "We walked along the river and talked about many things."
        dense = "The server client database api endpoint code function method object."
        assert technical_density(dense) > 0.1
        assert confidence_threshold(dense) > confidence_threshold(plain)


class TestContentClassifier:
    """Test the classifier's decision."""

    def test_meeting_classified(self):
        content_type, confidence = classify(MEETING_TEXT)
        assert content_type is ContentType.MEETING
        assert confidence > confidence_threshold(MEETING_TEXT)

    def test_journal_classified(self):
        content_type, _ = classify(JOURNAL_TEXT)
        assert content_type is ContentType.PERSONAL_JOURNAL

    def test_plain_text_is_general(self):
        content_type, _ = classify("The weather was mild and the river was calm.")
        assert content_type is ContentType.GENERAL

    def test_large_technical_transcript(self, technical_transcript):
        """A 20,000-word engineering transcript is technical with confidence of at least 0.3."""
        assert len(technical_transcript.split()) >= 20000
        content_type, confidence = classify(technical_transcript)
        assert content_type is ContentType.TECHNICAL
        assert confidence >= 0.3

    def test_accepted_result_always_clears_threshold(self):
        classifier = ContentClassifier()
        for text in (MEETING_TEXT, JOURNAL_TEXT, "The server returned an exception from the database module."):
            report = classifier.analyze(text)
            if report.accepted:
                assert report.confidence > report.threshold

    def test_classification_is_deterministic(self):
        classifier = ContentClassifier()
        assert classifier.analyze(MEETING_TEXT) == classifier.analyze(MEETING_TEXT)

    def test_recommendations_ordered_by_score(self):
        recommendations = ContentClassifier().recommendations(MEETING_TEXT)
        assert recommendations[0] is ContentType.MEETING
        assert len(recommendations) == 3

    def test_no_scorers_falls_back_to_general(self):
        report = ContentClassifier(scorers=[]).analyze(MEETING_TEXT)
        assert report.content_type is ContentType.GENERAL
        assert report.confidence == 0.0
