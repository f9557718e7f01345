"""
Base class for content category scorers.

A scorer turns a transcript into an affinity score in [0, 1] for one
ContentType. Every scorer has the same two-stage shape:

    base_score      keyword hits, regex signals and keyword density on the
                    lowercased, filler-stripped text, normalized by a fixed
                    divisor and clamped to 1.0
    enhanced_score  additional structural signals matched against the
                    original text, added on top of the base score

The final score is min(base + enhancements, 1.0). Scorers are pure and never
raise; text that matches nothing scores 0.

Example:
    @register_scorer(ContentType.MEETING)
    class MeetingScorer(BaseCategoryScorer):
        name = "Meeting"
        ...
"""

import re
from abc import ABC, abstractmethod
from typing import Any

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.analysis.text_utils import count_occurrences


def compile_patterns(patterns: list[str]) -> list[re.Pattern]:
    return [re.compile(p, re.IGNORECASE) for p in patterns]


class BaseCategoryScorer(ABC):
    """
    Abstract base for category scorers.

    Class Attributes:
        name: Human-readable scorer name (for logging)
        content_type: Category this scorer votes for (set by @register_scorer)
        enabled: Whether the classifier should consult this scorer
    """

    name: str = "BaseScorer"
    content_type: ContentType = ContentType.GENERAL
    enabled: bool = True

    @abstractmethod
    def base_score(self, text: str) -> float:
        """
        Score the lowercased, normalized text.

        Returns:
            Value in [0, 1]
        """

    @abstractmethod
    def enhancements(self, text: str, original_text: str) -> float:
        """
        Extra evidence added to the base score (unbounded, clamped by score()).

        Args:
            text: Lowercased, normalized text
            original_text: Text exactly as supplied by the caller
        """

    def score(self, normalized_text: str, original_text: str) -> float:
        """Affinity of the transcript for this scorer's category, in [0, 1]."""
        text = normalized_text.lower()
        total = self.base_score(text) + self.enhancements(text, original_text)
        return max(0.0, min(total, 1.0))

    # --- shared signal helpers ---

    @staticmethod
    def phrase_hits(text: str, phrases) -> int:
        """Number of phrases contained in text (each counted once)."""
        return sum(1 for phrase in phrases if phrase in text)

    @staticmethod
    def occurrence_count(text: str, phrases) -> int:
        """Total occurrences of all phrases in text."""
        return sum(count_occurrences(text, phrase) for phrase in phrases)

    @staticmethod
    def pattern_matches(patterns: list[re.Pattern], text: str) -> int:
        return sum(len(pattern.findall(text)) for pattern in patterns)

    @staticmethod
    def keyword_density(text: str, keywords) -> float:
        """Share of whitespace-delimited words containing any keyword."""
        words = text.lower().split()
        if not words:
            return 0.0
        hits = sum(1 for word in words if any(keyword in word for keyword in keywords))
        return hits / len(words)

    def get_config(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "content_type": self.content_type.value,
            "enabled": self.enabled,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, content_type={self.content_type.value})"
