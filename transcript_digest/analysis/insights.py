"""
Descriptive statistics about a transcript.

Key phrases, readability and sentence clustering feed the digest metadata
and the local engine's summaries; none of them affect classification.
"""

import re
from collections import Counter

from transcript_digest.analysis.text_utils import extract_sentences
from transcript_digest.extraction.tagger import Tagger

RELATED_SENTENCE_THRESHOLD = 0.3
MAX_KEY_PHRASES = 10

_VOWEL_GROUPS = re.compile(r"[aeiouy]+")


def count_syllables(word: str) -> int:
    """Vowel-group syllable estimate; a silent trailing "e" is not counted."""
    lowered = word.lower()
    count = len(_VOWEL_GROUPS.findall(lowered))
    if lowered.endswith("e") and count > 1:
        count -= 1
    return max(count, 1)


def readability_score(text: str) -> float:
    """
    Flesch reading ease rescaled to [0, 1] (1 is easiest).

    Returns 0.0 for text without sentences or words.
    """
    sentences = extract_sentences(text)
    words = text.split()
    if not sentences or not words:
        return 0.0

    syllables = sum(count_syllables(word) for word in words)
    flesch = 206.835 - 1.015 * (len(words) / len(sentences)) - 84.6 * (syllables / len(words))
    return max(0.0, min(1.0, flesch / 100.0))


def _word_set(sentence: str) -> set[str]:
    return set(sentence.lower().split())


def sentences_related(first: str, second: str) -> bool:
    words_a, words_b = _word_set(first), _word_set(second)
    union = words_a | words_b
    if not union:
        return False
    return len(words_a & words_b) / len(union) > RELATED_SENTENCE_THRESHOLD


def cluster_related_sentences(sentences: list[str]) -> list[list[str]]:
    """Greedy clustering: each unassigned sentence gathers the later sentences related to it."""
    clusters = []
    assigned = set()
    for i, sentence in enumerate(sentences):
        if i in assigned:
            continue
        cluster = [sentence]
        assigned.add(i)
        for j in range(i + 1, len(sentences)):
            if j not in assigned and sentences_related(sentence, sentences[j]):
                cluster.append(sentences[j])
                assigned.add(j)
        clusters.append(cluster)
    return clusters


def extract_key_phrases(text: str, tagger: Tagger, limit: int = MAX_KEY_PHRASES) -> list[str]:
    """
    Most frequent proper nouns and content nouns.

    Proper nouns of three or more letters and common nouns longer than three
    letters are counted; ties keep first-appearance order.
    """
    counts: Counter[str] = Counter()
    for sentence in extract_sentences(text):
        for token, tag in tagger.tag(sentence):
            if not token.isalpha():
                continue
            if tag.startswith("NNP") and len(token) >= 3:
                counts[token] += 1
            elif Tagger.is_noun(tag) and len(token) > 3:
                counts[token.lower()] += 1
    return [phrase for phrase, _ in counts.most_common(limit)]
