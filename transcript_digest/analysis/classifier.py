"""
Content Classifier

Scores a transcript against every registered category and commits to the
best one only when it clears a threshold that rises with transcript length
and complexity. Longer, denser transcripts need more corroborating evidence
before they are labelled, which curbs false positives on borderline text.

The classifier is a pure function of its input; it keeps no state between
calls.
"""

from dataclasses import dataclass, field
from typing import NamedTuple

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.analysis.scorers import BaseCategoryScorer, create_default_scorers
from transcript_digest.analysis.scorers.technical import DENSITY_KEYWORDS
from transcript_digest.analysis.text_utils import count_words, extract_sentences, normalize_for_scoring
from transcript_digest.config import CLASSIFIER_BASE_THRESHOLD, CLASSIFIER_MAX_THRESHOLD
from transcript_digest.logging_config import debug_log


class Classification(NamedTuple):
    """Outcome of classify(): unpacks as (content_type, confidence)."""
    content_type: ContentType
    confidence: float


@dataclass
class ClassificationReport:
    """
    Full scoring detail for one transcript.

    Attributes:
        content_type: Chosen category (GENERAL when nothing cleared the threshold)
        confidence: Best raw score. For GENERAL this is diagnostic only and
            not a passing classification.
        threshold: Threshold the best score had to exceed
        scores: Raw score per scored category, in classifier order
    """
    content_type: ContentType
    confidence: float
    threshold: float
    scores: dict[ContentType, float] = field(default_factory=dict)

    @property
    def accepted(self) -> bool:
        return self.content_type is not ContentType.GENERAL

    def as_classification(self) -> Classification:
        return Classification(self.content_type, self.confidence)


def technical_density(text: str) -> float:
    """Share of words containing a core technical keyword."""
    words = text.lower().split()
    if not words:
        return 0.0
    hits = sum(1 for word in words if any(keyword in word for keyword in DENSITY_KEYWORDS))
    return hits / len(words)


def confidence_threshold(text: str) -> float:
    """
    Minimum score a category needs to be accepted for this text.

    Starts at 0.3 and rises with word count, sentence count and technical
    density, capped at 0.6. Never decreases as any of those grow.
    """
    word_count = count_words(text)
    sentence_count = len(extract_sentences(text))
    threshold = CLASSIFIER_BASE_THRESHOLD

    if word_count > 500:
        threshold += 0.1
    elif word_count > 200:
        threshold += 0.05

    if sentence_count > 20:
        threshold += 0.1
    elif sentence_count > 10:
        threshold += 0.05

    if technical_density(text) > 0.1:
        threshold += 0.1

    return min(threshold, CLASSIFIER_MAX_THRESHOLD)


class ContentClassifier:
    """
    Picks a single ContentType for a transcript.

    Args:
        scorers: Scorers to consult, in tie-break order. Defaults to every
            registered scorer (meeting, journal, technical).
    """

    def __init__(self, scorers: list[BaseCategoryScorer] | None = None):
        self.scorers = scorers if scorers is not None else create_default_scorers()

    def analyze(self, text: str) -> ClassificationReport:
        normalized = normalize_for_scoring(text)
        scores = {
            scorer.content_type: scorer.score(normalized, text)
            for scorer in self.scorers
        }
        threshold = confidence_threshold(text)

        if not scores:
            return ClassificationReport(ContentType.GENERAL, 0.0, threshold, scores)

        # max() keeps the first of equal scores, so registration order breaks ties
        best_type, best_score = max(scores.items(), key=lambda item: item[1])

        if best_score > threshold:
            content_type = best_type
        else:
            content_type = ContentType.GENERAL

        debug_log(
            "[Classifier] Scores: "
            + ", ".join(f"{ct.value}={s:.3f}" for ct, s in scores.items())
            + f" | threshold={threshold:.2f} -> {content_type.value}"
        )
        return ClassificationReport(content_type, best_score, threshold, scores)

    def classify(self, text: str) -> Classification:
        """
        Classify text.

        Returns:
            (content_type, confidence). When no category clears the threshold
            the type is GENERAL and confidence is the best raw score.
        """
        return self.analyze(text).as_classification()

    def recommendations(self, text: str) -> list[ContentType]:
        """Scored categories ordered from best to worst fit."""
        scores = self.analyze(text).scores
        return sorted(scores, key=lambda ct: scores[ct], reverse=True)


def classify(text: str) -> Classification:
    """Classify with the default scorer set."""
    return ContentClassifier().classify(text)
