"""
Title Extractor

Picks sentences that read like a title for the transcript: explicitly
flagged topics ("the main topic is ...") or short, self-contained
statements. Narrative and attribution sentences are rejected outright.
"""

import re

from transcript_digest.analysis.text_utils import extract_sentences
from transcript_digest.config import MAX_TITLES, TASK_SIMILARITY_THRESHOLD, TITLE_MIN_CONFIDENCE
from transcript_digest.extraction.consolidation import consolidate_titles, rank_titles
from transcript_digest.extraction.models import TitleCategory, TitleItem
from transcript_digest.logging_config import debug_log

NON_TITLE_INDICATORS = [
    "this is", "that was", "we discussed", "we talked about", "the topic was",
    "according to", "research shows", "studies indicate", "experts say",
    "it's important to note", "it's worth mentioning", "interestingly",
    "this message comes from", "sponsored by", "advertisement",
]

TITLE_INDICATORS = [
    "main topic", "key theme", "primary focus", "central issue", "main point",
    "key decision", "important outcome", "major milestone", "primary question",
    "central problem", "main objective",
]

LEADING_WORDS = frozenset(["the", "a", "an", "key", "main", "primary", "important"])
REJECTED_WORDS = ["title", "reminder", "task"]

_LABEL_PREFIX = re.compile(r"^\s*(?:main topic|key theme|primary focus)\s*:\s*", re.IGNORECASE)

_CATEGORY_CUES = [
    (TitleCategory.MEETING, ["meeting", "discussion", "team", "agenda"]),
    (TitleCategory.PERSONAL, ["i feel", "my", "personal", "experience"]),
    (TitleCategory.TECHNICAL, ["code", "system", "technical", "implementation"]),
]


def categorize_title(text: str) -> TitleCategory:
    lowered = text.lower()
    for category, cues in _CATEGORY_CUES:
        if any(re.search(rf"\b{re.escape(cue)}\b", lowered) for cue in cues):
            return category
    return TitleCategory.GENERAL


class TitleExtractor:
    """
    Extracts ranked TitleItems.

    Args:
        min_confidence: Titles below this confidence are dropped
        max_titles: Number of titles returned after ranking
        similarity_threshold: Jaccard overlap above which same-category titles merge
    """

    def __init__(self, min_confidence: float = TITLE_MIN_CONFIDENCE,
                 max_titles: int = MAX_TITLES,
                 similarity_threshold: float = TASK_SIMILARITY_THRESHOLD):
        self.min_confidence = min_confidence
        self.max_titles = max_titles
        self.similarity_threshold = similarity_threshold

    def extract(self, text: str) -> list[TitleItem]:
        candidates = []
        for sentence in extract_sentences(text):
            title = self.title_from_sentence(sentence)
            if title is not None:
                candidates.append(title)

        consolidated = consolidate_titles(candidates, self.similarity_threshold)
        ranked = rank_titles(consolidated, self.max_titles)
        debug_log(f"[TitleExtractor] {len(candidates)} candidates -> {len(ranked)} returned")
        return ranked

    def title_from_sentence(self, sentence: str) -> TitleItem | None:
        trimmed = sentence.strip()
        lowered = trimmed.lower()

        if any(indicator in lowered for indicator in NON_TITLE_INDICATORS):
            return None

        has_indicator = any(indicator in lowered for indicator in TITLE_INDICATORS)
        good_length = 10 <= len(trimmed) <= 100
        if not (has_indicator or (good_length and len(trimmed) > 20)):
            return None

        confidence = 0.5
        if has_indicator:
            confidence += 0.3
        if good_length:
            confidence += 0.2
        first_word = lowered.split(maxsplit=1)[0] if lowered else ""
        if first_word in LEADING_WORDS:
            confidence += 0.1
        confidence = min(confidence, 1.0)

        if confidence < self.min_confidence:
            return None

        cleaned = _LABEL_PREFIX.sub("", trimmed).strip()
        if len(cleaned) < 5 or any(word in cleaned.lower() for word in REJECTED_WORDS):
            return None

        return TitleItem(text=cleaned, confidence=confidence, category=categorize_title(cleaned))
