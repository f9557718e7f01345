"""
Tests for task extraction.

The fake tagger from conftest stands in for NLTK so results do not depend
on downloaded tagger models.
"""

import nltk
import pytest

from transcript_digest.extraction.models import Priority, TaskCategory
from transcript_digest.extraction.tagger import NltkTagger
from transcript_digest.extraction.task_extractor import TaskExtractor, strip_task_prefix
from transcript_digest.extraction.time_references import (
    adjust_priority_for_urgency,
    find_task_time_reference,
)


class TestCallAndPurchase:
    """The call-and-milk example from the product brief."""

    TEXT = "Call Bob tomorrow about the contract. Also need to buy milk."

    def test_call_task_extracted(self, fake_tagger):
        tasks = TaskExtractor(tagger=fake_tagger).extract(self.TEXT)
        call_tasks = [t for t in tasks if t.category is TaskCategory.CALL]

        assert len(call_tasks) == 1
        task = call_tasks[0]
        assert "Bob" in task.text and "contract" in task.text
        assert task.time_reference.lower() == "tomorrow"
        assert task.confidence >= 0.6

    def test_purchase_task_extracted(self, fake_tagger):
        tasks = TaskExtractor(tagger=fake_tagger).extract(self.TEXT)
        purchase_tasks = [t for t in tasks if t.category is TaskCategory.PURCHASE]

        assert len(purchase_tasks) == 1
        assert "milk" in purchase_tasks[0].text
        assert purchase_tasks[0].confidence >= 0.6

    def test_pattern_and_verb_candidates_merge(self, fake_tagger):
        """'need to buy' (1.0) and 'Buy milk.' (0.7) merge to their mean."""
        tasks = TaskExtractor(tagger=fake_tagger).extract(self.TEXT)
        purchase = next(t for t in tasks if t.category is TaskCategory.PURCHASE)
        assert purchase.confidence == pytest.approx(0.85)
        assert purchase.text == "Also need to buy milk."

    def test_tomorrow_raises_priority(self, fake_tagger):
        tasks = TaskExtractor(tagger=fake_tagger).extract(self.TEXT)
        assert tasks[0].category is TaskCategory.CALL
        assert tasks[0].priority is Priority.HIGH


class TestStrategies:
    """Test the individual extraction strategies."""

    def test_imperative_reminder_style_task(self, fake_tagger):
        tasks = TaskExtractor(tagger=fake_tagger).extract_from_sentence("Make sure the invoices are signed")
        assert any(t.confidence == pytest.approx(0.9) and t.category is TaskCategory.GENERAL for t in tasks)

    def test_checking_imperative_is_research(self, fake_tagger):
        tasks = TaskExtractor(tagger=fake_tagger).extract_from_sentence("Verify the totals in the spreadsheet")
        assert any(t.category is TaskCategory.RESEARCH for t in tasks)

    def test_contextual_action_item(self, fake_tagger):
        tasks = TaskExtractor(tagger=fake_tagger).extract_from_sentence(
            "The action item from this session belongs to Priya"
        )
        assert any(t.category is TaskCategory.MEETING and t.confidence == pytest.approx(0.8) for t in tasks)

    def test_deadline_is_high_priority(self, fake_tagger):
        tasks = TaskExtractor(tagger=fake_tagger).extract_from_sentence("The deadline for the grant is close")
        deadline_tasks = [t for t in tasks if t.confidence == pytest.approx(0.7) and t.category is TaskCategory.GENERAL]
        assert deadline_tasks
        assert deadline_tasks[0].priority is Priority.HIGH

    def test_strong_verb_confidence(self, fake_tagger):
        tasks = TaskExtractor(tagger=fake_tagger).extract_from_sentence("Finish the quarterly report")
        assert any(t.text == "Finish the quarterly report." and t.confidence == pytest.approx(0.8) for t in tasks)

    def test_low_confidence_candidates_dropped(self, fake_tagger):
        """Contextual store mentions score 0.6 and fall under a stricter minimum."""
        extractor = TaskExtractor(tagger=fake_tagger, min_confidence=0.65)
        assert extractor.extract_from_sentence("The store on the corner closes early") == []

    def test_sentence_without_tasks(self, fake_tagger):
        assert TaskExtractor(tagger=fake_tagger).extract("The weather was lovely all afternoon.") == []

    def test_max_tasks_respected(self, fake_tagger):
        text = ". ".join([
            "I need to call the bank",
            "I need to email the landlord",
            "We need to schedule the review",
            "I need to buy new shoes",
            "Travel to Denver for the summit",
            "Make sure the garage is locked",
            "Investigate the noise in the attic",
        ]) + "."
        tasks = TaskExtractor(tagger=fake_tagger, max_tasks=3).extract(text)
        assert len(tasks) == 3

    def test_extraction_is_deterministic(self, fake_tagger):
        text = "Call Bob tomorrow about the contract. Also need to buy milk. Make sure to pack the tent."
        extractor = TaskExtractor(tagger=fake_tagger)
        assert extractor.extract(text) == extractor.extract(text)

    def test_tagger_lookup_error_is_tolerated(self):
        """Without tagger data the phrase patterns still contribute."""
        tasks = TaskExtractor(tagger=FailingTagger()).extract("I need to call the plumber today.")
        assert [t.category for t in tasks] == [TaskCategory.CALL]

    def test_leading_verb_without_tagger_data(self):
        """A sentence-initial action verb is still found when tagging fails."""
        tasks = TaskExtractor(tagger=FailingTagger()).extract("Call Bob tomorrow about the contract.")

        assert len(tasks) == 1
        assert tasks[0].category is TaskCategory.CALL
        assert tasks[0].text == "Call Bob tomorrow about the contract."

    def test_call_and_purchase_without_tagger_data(self):
        tasks = TaskExtractor(tagger=FailingTagger()).extract(TestCallAndPurchase.TEXT)
        assert {t.category for t in tasks} == {TaskCategory.CALL, TaskCategory.PURCHASE}


class FailingTagger:
    def tag(self, sentence):
        raise LookupError("averaged_perceptron_tagger_eng not found")


class TestNltkTaggerData:
    """Test behaviour when the NLTK tagger model cannot be fetched."""

    @pytest.fixture
    def missing_model(self, monkeypatch):
        downloads = []

        def fail_find(resource):
            raise LookupError(resource)

        def fail_download(resource, quiet=True):
            downloads.append(resource)
            return False

        monkeypatch.setattr(NltkTagger, "_data_ready", False)
        monkeypatch.setattr(NltkTagger, "_data_missing", False)
        monkeypatch.setattr(nltk.data, "find", fail_find)
        monkeypatch.setattr(nltk, "download", fail_download)
        return downloads

    def test_failed_download_raises_lookup_error(self, missing_model):
        with pytest.raises(LookupError):
            NltkTagger().tag("Call Bob tomorrow.")

    def test_download_attempted_once(self, missing_model):
        tagger = NltkTagger()
        for _ in range(3):
            with pytest.raises(LookupError):
                tagger.tag("Call Bob tomorrow.")
        assert missing_model == list(NltkTagger._TAGGER_RESOURCES)

    def test_extractor_falls_back_to_leading_verb(self, missing_model):
        tasks = TaskExtractor(tagger=NltkTagger()).extract("Call Bob tomorrow about the contract.")
        assert [t.category for t in tasks] == [TaskCategory.CALL]


class TestTaskHelpers:
    """Test prefix stripping, time references and urgency."""

    def test_strip_prefix(self):
        assert strip_task_prefix("i need to call the bank") == "Call the bank."

    def test_time_reference_terms(self):
        assert find_task_time_reference("Send it next week please") == "Next Week"
        assert find_task_time_reference("Send it by 5pm") == "by 5pm"
        assert find_task_time_reference("Send it whenever") is None

    def test_may_is_not_a_month(self):
        assert find_task_time_reference("We may need more chairs") is None

    def test_time_terms_match_whole_words(self):
        assert find_task_time_reference("Review the mondays schedule") is None

    def test_urgency_adjustment(self):
        assert adjust_priority_for_urgency(Priority.LOW, "This is urgent") is Priority.HIGH
        assert adjust_priority_for_urgency(Priority.LOW, "It is important") is Priority.MEDIUM
        assert adjust_priority_for_urgency(Priority.MEDIUM, "It is important") is Priority.HIGH
        assert adjust_priority_for_urgency(Priority.HIGH, "Maybe someday") is Priority.LOW
        assert adjust_priority_for_urgency(Priority.MEDIUM, "Plain sentence") is Priority.MEDIUM
