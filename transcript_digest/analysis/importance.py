"""
Sentence importance scoring.

Used to rank sentences for extractive summaries. Combines length banding,
important-term and time-indicator hits, and a bonus for sentences near the
start or end of the document, then halves repetitive sentences.
"""

from transcript_digest.analysis.text_utils import split_raw_sentences

IMPORTANT_TERMS = [
    "important", "critical", "urgent", "priority", "key", "main", "primary",
    "need", "must", "should", "required", "necessary", "essential",
    "remember", "remind", "don't forget", "make sure", "ensure",
    "deadline", "due", "by", "before", "after", "when", "schedule",
    "call", "meet", "visit", "go", "come", "send", "email", "text",
    "buy", "get", "take", "bring", "pick up", "drop off", "return",
    "decision", "conclusion", "result", "outcome", "summary", "key point",
]

TIME_INDICATORS = [
    "today", "tomorrow", "yesterday", "next week", "next month",
    "this morning", "this afternoon", "this evening", "tonight",
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
    "january", "february", "march", "april", "may", "june",
    "july", "august", "september", "october", "november", "december",
]

REPETITIVE_UNIQUE_RATIO = 0.6


def length_score(word_count: int) -> float:
    """Favor sentences of 8-25 words."""
    if 8 <= word_count <= 25:
        return 2.0
    if 5 <= word_count <= 7 or 26 <= word_count <= 35:
        return 1.0
    if 36 <= word_count <= 50:
        return 0.5
    return 0.1


def key_term_score(sentence: str) -> float:
    lowered = sentence.lower()
    score = float(sum(1 for term in IMPORTANT_TERMS if term in lowered))
    score += 1.5 * sum(1 for indicator in TIME_INDICATORS if indicator in lowered)
    return score


def position_score(sentence: str, full_text: str) -> float:
    """Bonus for sentences among the first or last three of the document."""
    sentences = split_raw_sentences(full_text)
    target = sentence.strip()
    position = next((i for i, s in enumerate(sentences) if target in s), None)
    if position is None:
        return 0.0

    last = len(sentences) - 1
    if position == 0 or position == last:
        return 1.5
    if position < 3 or position >= len(sentences) - 3:
        return 1.0
    return 0.0


def is_repetitive(sentence: str) -> bool:
    words = sentence.lower().split()
    if not words:
        return False
    return len(set(words)) / len(words) < REPETITIVE_UNIQUE_RATIO


def sentence_importance(sentence: str, full_text: str) -> float:
    """
    Rank a sentence within its document.

    Args:
        sentence: Sentence to score
        full_text: Document the sentence came from (for the position bonus)

    Returns:
        Non-negative score; higher means more summary-worthy
    """
    score = length_score(len(sentence.split()))
    score += key_term_score(sentence)
    score += position_score(sentence, full_text)

    if is_repetitive(sentence):
        score *= 0.5

    return score
