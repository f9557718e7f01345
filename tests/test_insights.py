"""
Tests for transcript insights: syllables, readability, clustering, key phrases.
"""

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.analysis.insights import (
    cluster_related_sentences,
    count_syllables,
    extract_key_phrases,
    readability_score,
    sentences_related,
)
from transcript_digest.digest.merger import majority_content_type, merge_key_phrases
from transcript_digest.digest.result_types import ChunkResult


class TestReadability:

    def test_syllable_estimates(self):
        assert count_syllables("make") == 1
        assert count_syllables("banana") == 3
        assert count_syllables("rhythm") == 1
        assert count_syllables("the") == 1

    def test_empty_text(self):
        assert readability_score("") == 0.0

    def test_simple_text_reads_easier(self):
        simple = "The cat sat on the mat. The dog ran to the sun."
        dense = ("Organizational interdependencies necessitate comprehensive "
                 "institutional reconfiguration.")
        assert readability_score(simple) > readability_score(dense)
        assert 0.0 <= readability_score(dense) <= readability_score(simple) <= 1.0


class TestClustering:

    def test_related_sentences(self):
        assert sentences_related("the cat sat on the mat", "the cat sat on the hat")
        assert not sentences_related("the cat sat on the mat", "Budget numbers look fine")

    def test_cluster_groups_related_sentences(self):
        sentences = ["the cat sat on the mat", "Budget numbers look fine", "the cat sat on the hat"]
        assert cluster_related_sentences(sentences) == [
            ["the cat sat on the mat", "the cat sat on the hat"],
            ["Budget numbers look fine"],
        ]


class TestKeyPhrases:

    def test_most_frequent_names_first(self, fake_tagger):
        text = "Alice met Bob at noon. Alice reviewed the budget with Bob and Alice."
        phrases = extract_key_phrases(text, fake_tagger)
        assert phrases[:2] == ["Alice", "Bob"]
        assert "budget" in phrases

    def test_limit(self, fake_tagger):
        text = "Alice met Bob at noon. Alice reviewed the budget with Bob and Alice."
        assert extract_key_phrases(text, fake_tagger, limit=1) == ["Alice"]

    def test_merge_counts_chunks_not_mentions(self):
        merged = merge_key_phrases([["Budget", "Alice", "Alice"], ["alice", "Roadmap"], ["Roadmap"]])
        assert merged == ["Alice", "Roadmap", "Budget"]

    def test_merge_limit(self):
        assert merge_key_phrases([["one", "two", "three"]], limit=2) == ["one", "two"]


class TestMajorityContentType:

    def test_majority_wins(self):
        results = [
            ChunkResult(summary="", content_type=ContentType.MEETING),
            ChunkResult(summary="", content_type=ContentType.TECHNICAL),
            ChunkResult(summary="", content_type=ContentType.TECHNICAL),
        ]
        assert majority_content_type(results) is ContentType.TECHNICAL

    def test_tie_goes_to_first_seen(self):
        results = [
            ChunkResult(summary="", content_type=ContentType.MEETING),
            ChunkResult(summary="", content_type=ContentType.TECHNICAL),
        ]
        assert majority_content_type(results) is ContentType.MEETING

    def test_no_results(self):
        assert majority_content_type([]) is ContentType.GENERAL
