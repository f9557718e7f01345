"""
Text helpers shared by the scorers, extractors and chunker.

Sentence splitting here is deliberately simple (terminal punctuation only);
spoken transcripts rarely carry abbreviations worth special-casing.
"""

import re

# Common English stop words, excluded from similarity comparisons
STOPWORDS = frozenset({
    'the', 'a', 'an', 'and', 'or', 'but', 'in', 'on', 'at', 'to', 'for',
    'of', 'with', 'by', 'from', 'as', 'is', 'was', 'are', 'were', 'been',
    'be', 'have', 'has', 'had', 'do', 'does', 'did', 'will', 'would',
    'could', 'should', 'may', 'might', 'must', 'shall', 'can', 'need',
    'it', 'its', 'this', 'that', 'these', 'those', 'i', 'you', 'he',
    'she', 'we', 'they', 'me', 'him', 'her', 'us', 'them', 'my', 'your',
    'his', 'our', 'their', 'what', 'which', 'who', 'whom', 'when',
    'where', 'why', 'how', 'all', 'each', 'every', 'both', 'few', 'more',
    'most', 'other', 'some', 'such', 'no', 'not', 'only', 'own', 'same',
    'so', 'than', 'too', 'very', 'just', 'also',
})

_WORD_PATTERN = re.compile(r"\b[a-zA-Z][a-zA-Z0-9'-]*[a-zA-Z0-9]\b|\b[a-zA-Z]\b")
_FILLER_PATTERN = re.compile(r"\b(?:um|uh|like|you know)\s+", re.IGNORECASE)
_WHITESPACE_PATTERN = re.compile(r"\s+")
_SENTENCE_TERMINATORS = re.compile(r"[.!?]")

MIN_SENTENCE_CHARS = 10


def normalize_for_scoring(text: str) -> str:
    """
    Prepare text for category scoring.

    Trims, collapses whitespace and strips the fillers "um", "uh", "like" and
    "you know". The result is only used for scoring, never for display.
    """
    cleaned = _WHITESPACE_PATTERN.sub(" ", text.strip())
    return _FILLER_PATTERN.sub("", cleaned)


def split_raw_sentences(text: str) -> list[str]:
    """Split on . ! ? and return every non-empty trimmed fragment."""
    return [part.strip() for part in _SENTENCE_TERMINATORS.split(text) if part.strip()]


def extract_sentences(text: str) -> list[str]:
    """Split on . ! ? keeping fragments longer than ten characters."""
    return [s for s in split_raw_sentences(text) if len(s) > MIN_SENTENCE_CHARS]


def count_words(text: str) -> int:
    return len(text.split())


def tokenize(text: str) -> list[str]:
    """Lowercase word tokens (letters, digits, inner apostrophes and hyphens)."""
    return _WORD_PATTERN.findall(text.lower())


def content_words(text: str) -> set[str]:
    """Distinct tokens of ``text`` with stop words removed."""
    return {token for token in tokenize(text) if token not in STOPWORDS}


def jaccard_similarity(first: str, second: str) -> float:
    """
    Word-overlap similarity of two texts in [0, 1].

    Two texts with no content words at all compare as 0.0.
    """
    words_a = content_words(first)
    words_b = content_words(second)
    union = words_a | words_b
    if not union:
        return 0.0
    return len(words_a & words_b) / len(union)


def count_occurrences(text: str, phrase: str) -> int:
    """Non-overlapping occurrences of ``phrase`` in ``text``."""
    if not phrase:
        return 0
    return text.count(phrase)
