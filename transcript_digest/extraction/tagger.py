"""
Part-of-speech tagging capability.

Extractors only need (token, tag) pairs using Penn Treebank tags, so any
tagging library can be plugged in behind the Tagger interface.
"""

import threading
from abc import ABC, abstractmethod

import nltk
from nltk.tokenize import TreebankWordTokenizer

from transcript_digest.config import DEBUG_MODE
from transcript_digest.logging_config import debug_log, warning


class Tagger(ABC):
    """Tags a sentence as [(token, penn_treebank_tag), ...]."""

    @abstractmethod
    def tag(self, sentence: str) -> list[tuple[str, str]]:
        pass

    @staticmethod
    def is_verb(tag: str) -> bool:
        return tag.startswith("VB")

    @staticmethod
    def is_noun(tag: str) -> bool:
        return tag.startswith("NN")


class NltkTagger(Tagger):
    """
    Tagger backed by NLTK's averaged perceptron model.

    Tokenization uses the Treebank tokenizer, which needs no downloaded data.
    The tagger model is downloaded on first use if it is missing.
    """

    # Newer NLTK releases ship the English model under the _eng name
    _TAGGER_RESOURCES = ("averaged_perceptron_tagger_eng", "averaged_perceptron_tagger")

    _data_lock = threading.Lock()
    _data_ready = False
    _data_missing = False

    def __init__(self):
        self._tokenizer = TreebankWordTokenizer()

    @classmethod
    def _ensure_tagger_data(cls):
        with cls._data_lock:
            if cls._data_ready or cls._data_missing:
                return
            found = False
            for resource in cls._TAGGER_RESOURCES:
                try:
                    nltk.data.find(f"taggers/{resource}")
                    found = True
                except LookupError:
                    warning(f"NLTK tagger model '{resource}' not found. Downloading...")
                    found = nltk.download(resource, quiet=not DEBUG_MODE) or found
            if not found:
                warning("NLTK tagger model could not be downloaded; part-of-speech tagging is disabled")
                cls._data_missing = True
                return
            cls._data_ready = True
            debug_log("[Tagger] NLTK perceptron tagger ready")

    def tag(self, sentence: str) -> list[tuple[str, str]]:
        tokens = self._tokenizer.tokenize(sentence)
        if not tokens:
            return []
        self._ensure_tagger_data()
        if self._data_missing:
            raise LookupError("NLTK averaged perceptron tagger model is not available")
        return nltk.pos_tag(tokens)
