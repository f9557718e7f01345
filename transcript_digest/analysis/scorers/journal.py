"""
Personal journal scorer.

First-person reflection, emotional vocabulary and everyday time references.
"""

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.analysis.scorers import register_scorer
from transcript_digest.analysis.scorers.base import BaseCategoryScorer

JOURNAL_KEYWORDS = [
    "i feel", "i think", "i believe", "i remember", "i realized",
    "today", "yesterday", "this morning", "tonight", "this week",
    "my day", "my life", "my experience", "my thoughts", "my feelings",
    "grateful", "thankful", "blessed", "happy", "sad", "excited",
    "worried", "anxious", "peaceful", "content", "frustrated",
    "learned", "discovered", "noticed", "observed", "reflected",
]

# Trailing spaces keep "i" from matching inside words like "it"
PERSONAL_PRONOUNS = ["i ", "my ", "me ", "myself "]
DENSITY_PRONOUNS = PERSONAL_PRONOUNS + ["mine "]

EMOTIONAL_WORDS = [
    "love", "hate", "fear", "hope", "dream", "wish", "want", "need",
    "amazing", "wonderful", "terrible", "awful", "beautiful", "peaceful",
]

REFLECTION_INDICATORS = [
    "i realized", "i learned", "i discovered", "i noticed", "i observed",
    "looking back", "in retrospect", "thinking about", "reflecting on",
    "i feel like", "i think that", "i believe", "my experience",
]

INTENSITY_WORDS = [
    "overwhelmed", "ecstatic", "devastated", "thrilled", "heartbroken",
    "elated", "furious", "terrified", "euphoric", "desperate",
]

TEMPORAL_REFERENCES = [
    "today", "yesterday", "this morning", "tonight", "this week",
    "last week", "next week", "this month", "this year",
]


@register_scorer(ContentType.PERSONAL_JOURNAL)
class JournalScorer(BaseCategoryScorer):
    name = "Journal"

    def base_score(self, text: str) -> float:
        score = float(self.phrase_hits(text, JOURNAL_KEYWORDS))
        score += 0.3 * self.occurrence_count(text, PERSONAL_PRONOUNS)
        score += 0.5 * self.phrase_hits(text, EMOTIONAL_WORDS)
        return min(score / 15.0, 1.0)

    def enhancements(self, text: str, original_text: str) -> float:
        score = 0.4 * self.phrase_hits(text, REFLECTION_INDICATORS)
        score += 0.3 * self.phrase_hits(text, INTENSITY_WORDS)

        word_count = len(original_text.split())
        if word_count:
            pronouns = self.occurrence_count(original_text.lower(), DENSITY_PRONOUNS)
            score += (pronouns / word_count) * 3.0

        score += 0.2 * self.phrase_hits(text, TEMPORAL_REFERENCES)
        return score
