"""
Reminder Extractor

Reminders are time-sensitive items. Four strategies run on every sentence:
explicit requests ("remind me to"), time-bound commitments ("appointment
at", "due by"), named events ("birthday", "interview") and recurring
routines ("every morning"). Each candidate carries a parsed time reference
and an urgency derived from it.
"""

from datetime import datetime

from transcript_digest.analysis.text_utils import extract_sentences
from transcript_digest.config import (
    EXTRACTION_MIN_CONFIDENCE,
    MAX_REMINDERS,
    REMINDER_SIMILARITY_THRESHOLD,
)
from transcript_digest.extraction.consolidation import consolidate_reminders, rank_reminders
from transcript_digest.extraction.models import ReminderItem, TimeReference, Urgency
from transcript_digest.extraction.time_references import (
    determine_urgency,
    has_time_context,
    parse_time_reference,
)
from transcript_digest.logging_config import debug_log

EXPLICIT_INDICATORS = [
    ("remind me to", 0.95),
    ("remind me about", 0.95),
    ("don't forget to", 0.95),
    ("don't forget about", 0.95),
    ("i need to remember to", 0.9),
    ("i need to remember about", 0.9),
    ("set reminder for", 0.95),
    ("set reminder to", 0.95),
    ("note to self:", 0.9),
    ("mental note:", 0.9),
]

TIME_BOUND_PATTERNS = [
    ("appointment at", Urgency.TODAY),
    ("meeting at", Urgency.TODAY),
    ("call at", Urgency.TODAY),
    ("deadline", Urgency.THIS_WEEK),
    ("due by", Urgency.THIS_WEEK),
    ("due on", Urgency.THIS_WEEK),
    ("expires", Urgency.THIS_WEEK),
    ("ends", Urgency.THIS_WEEK),
    ("starts", Urgency.TODAY),
    ("begins", Urgency.TODAY),
    ("scheduled for", Urgency.TODAY),
    ("planned for", Urgency.THIS_WEEK),
]
STRONG_TIME_PATTERNS = ["deadline", "due by", "appointment at", "meeting at"]

EVENT_PATTERNS = [
    "birthday", "anniversary", "vacation", "holiday", "conference",
    "presentation", "interview", "exam", "test", "graduation",
    "wedding", "party", "dinner", "lunch", "breakfast",
]
IMPORTANT_EVENTS = frozenset(["birthday", "anniversary", "wedding", "graduation", "interview"])

RECURRING_PATTERNS = [
    "every day", "daily", "every morning", "every evening",
    "every week", "weekly", "every monday", "every friday",
    "every month", "monthly", "every year", "annually",
    "regularly", "periodically", "routinely",
]
STRONG_RECURRING = frozenset(["every day", "daily", "weekly", "monthly"])

REMINDER_PREFIXES = [
    "remind me to", "remind me about", "don't forget to", "don't forget about",
    "remember to", "remember about", "make sure to", "make sure i",
    "note to self", "mental note", "i need to remember", "i should remember",
    "set reminder",
]


def format_reminder_string(text: str) -> str:
    """Capitalize the first letter; reminders are fragments, so no punctuation is added."""
    formatted = text.strip()
    if formatted:
        formatted = formatted[0].upper() + formatted[1:]
    return formatted


def strip_reminder_prefix(sentence: str) -> str:
    cleaned = sentence.strip()
    lowered = cleaned.lower()
    for prefix in REMINDER_PREFIXES:
        if lowered.startswith(prefix):
            cleaned = cleaned[len(prefix):].strip(" :")
            break
    return format_reminder_string(cleaned)


class ReminderExtractor:
    """
    Extracts ranked ReminderItems from transcript text.

    Args:
        min_confidence: Candidates below this are discarded
        max_reminders: Number of reminders returned after ranking
        similarity_threshold: Jaccard overlap above which reminders merge
        clock: Callable returning "now"; relative dates are computed from it
    """

    def __init__(self, min_confidence: float = EXTRACTION_MIN_CONFIDENCE,
                 max_reminders: int = MAX_REMINDERS,
                 similarity_threshold: float = REMINDER_SIMILARITY_THRESHOLD,
                 clock=datetime.now):
        self.min_confidence = min_confidence
        self.max_reminders = max_reminders
        self.similarity_threshold = similarity_threshold
        self.clock = clock

    def extract(self, text: str) -> list[ReminderItem]:
        now = self.clock()
        candidates = []
        for sentence in extract_sentences(text):
            candidates.extend(self.extract_from_sentence(sentence, now))

        consolidated = consolidate_reminders(candidates, self.similarity_threshold)
        ranked = rank_reminders(consolidated, self.max_reminders)
        debug_log(
            f"[ReminderExtractor] {len(candidates)} candidates -> "
            f"{len(consolidated)} after consolidation -> {len(ranked)} returned"
        )
        return ranked

    def extract_from_sentence(self, sentence: str, now: datetime | None = None) -> list[ReminderItem]:
        now = now or self.clock()
        reference = parse_time_reference(sentence, now)

        candidates = []
        explicit = self._explicit_reminder(sentence, reference, now)
        if explicit:
            candidates.append(explicit)
        candidates.extend(self._time_bound_reminders(sentence, reference, now))
        candidates.extend(self._event_reminders(sentence, reference, now))
        candidates.extend(self._recurring_reminders(sentence))

        return [r for r in candidates if r.confidence >= self.min_confidence]

    def _explicit_reminder(self, sentence: str, reference: TimeReference, now: datetime) -> ReminderItem | None:
        lowered = sentence.lower()
        for phrase, base in EXPLICIT_INDICATORS:
            if phrase not in lowered:
                continue
            confidence = base
            if reference.is_specific:
                confidence += 0.1
            if "about" in sentence or "to" in sentence:
                confidence += 0.05
            return ReminderItem(
                text=strip_reminder_prefix(sentence),
                time_reference=reference,
                urgency=determine_urgency(reference, sentence, now),
                confidence=min(confidence, 1.0),
            )
        return None

    def _time_bound_reminders(self, sentence: str, reference: TimeReference, now: datetime) -> list[ReminderItem]:
        if not has_time_context(reference):
            return []

        lowered = sentence.lower()
        reminders = []
        for phrase, hint in TIME_BOUND_PATTERNS:
            if phrase not in lowered:
                continue
            confidence = 0.7
            if reference.is_specific:
                confidence += 0.2
            if any(strong in lowered for strong in STRONG_TIME_PATTERNS):
                confidence += 0.1
            reminders.append(ReminderItem(
                text=format_reminder_string(sentence),
                time_reference=reference,
                urgency=determine_urgency(reference, sentence, now, hint=hint),
                confidence=min(confidence, 1.0),
            ))
        return reminders

    def _event_reminders(self, sentence: str, reference: TimeReference, now: datetime) -> list[ReminderItem]:
        if not has_time_context(reference):
            return []

        lowered = sentence.lower()
        reminders = []
        for event in EVENT_PATTERNS:
            if event not in lowered:
                continue
            confidence = 0.6
            if reference.is_specific:
                confidence += 0.2
            if event in IMPORTANT_EVENTS:
                confidence += 0.1
            reminders.append(ReminderItem(
                text=f"{event.capitalize()}: {format_reminder_string(sentence)}",
                time_reference=reference,
                urgency=determine_urgency(reference, sentence, now),
                confidence=min(confidence, 1.0),
            ))
        return reminders

    def _recurring_reminders(self, sentence: str) -> list[ReminderItem]:
        lowered = sentence.lower()
        reminders = []
        for routine in RECURRING_PATTERNS:
            if routine not in lowered:
                continue
            start = lowered.index(routine)
            remainder = (sentence[:start] + sentence[start + len(routine):]).strip()
            reminders.append(ReminderItem(
                text=format_reminder_string(" ".join(remainder.split())),
                time_reference=TimeReference(original_text=routine, relative_time=f"Recurring: {routine}"),
                urgency=Urgency.LATER,
                confidence=0.7 if routine in STRONG_RECURRING else 0.5,
            ))
        return reminders
