"""
Token estimation for engine budgets.

The estimate counts one token per word plus one per punctuation or symbol
character, plus one per sentence boundary. It over-counts plain prose
slightly, which keeps chunks safely inside engine limits.
"""

import re

_PUNCTUATION = frozenset(".,!?;:'\"()[]{}")
_SYMBOLS = frozenset("0123456789@#$%^&*+=<>/\\|")
_SENTENCE_BREAK = re.compile(r"[.!?]")


def estimate_word_tokens(word: str) -> int:
    """Tokens attributed to a single whitespace-delimited word."""
    extra = sum(1 for ch in word if ch in _PUNCTUATION or ch in _SYMBOLS)
    return 1 + extra


def estimate_tokens(text: str) -> int:
    """
    Estimate how many engine tokens ``text`` will use.

    Returns:
        At least 1, even for empty text.
    """
    word_tokens = sum(estimate_word_tokens(word) for word in text.split())
    sentence_tokens = len(_SENTENCE_BREAK.split(text))
    return max(1, word_tokens + sentence_tokens)


def needs_chunking(text: str, max_tokens: int) -> bool:
    return estimate_tokens(text) > max_tokens
