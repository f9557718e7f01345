"""
Time-reference and urgency detection for tasks and reminders.

Relative vocabulary is matched on whole words. "may" is left out of the
month list because it is far more often the modal verb than the month.
"""

import re
from datetime import datetime, timedelta

from transcript_digest.extraction.models import Priority, TimeReference, Urgency

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
MONTHS = [
    "january", "february", "march", "april", "june",
    "july", "august", "september", "october", "november", "december",
]

# Checked in order; the first term present wins
TASK_TIME_TERMS = [
    "today", "tomorrow", "tonight", "this morning", "this afternoon", "this evening",
    "next week", "next month", "next year", "later today", "later this week",
] + WEEKDAYS + MONTHS

CLOCK_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        r"at \d{1,2}(?::\d{2})?(?:am|pm)?",
        r"by \d{1,2}(?::\d{2})?(?:am|pm)?",
        r"\d{1,2}(?::\d{2})?(?:am|pm)",
        r"in \d+ (?:hours|hour|minutes|minute|days|day)",
    )
]

URGENT_CUES = ["urgent", "asap", "immediately", "right away", "critical", "emergency"]
RAISE_CUES = ["important", "must", "have to", "today", "tomorrow", "deadline"]
LOWER_CUES = ["maybe", "eventually", "sometime", "when possible", "if time permits"]


def _contains_term(lowered: str, term: str) -> bool:
    return re.search(rf"\b{re.escape(term)}\b", lowered) is not None


def find_task_time_reference(sentence: str) -> str | None:
    """
    Time reference for a task, e.g. "Tomorrow", "Next Week", "at 3pm".

    Vocabulary terms are returned title-cased; clock times as written.
    """
    lowered = sentence.lower()
    for term in TASK_TIME_TERMS:
        if _contains_term(lowered, term):
            return term.title()

    for pattern in CLOCK_PATTERNS:
        match = pattern.search(sentence)
        if match:
            return match.group(0)
    return None


def adjust_priority_for_urgency(base: Priority, sentence: str) -> Priority:
    """
    Apply urgency cues to a base priority.

    Urgent words force HIGH; importance or near-term words raise LOW to
    MEDIUM and anything else to HIGH; hedges like "maybe" force LOW.
    """
    lowered = sentence.lower()
    if any(cue in lowered for cue in URGENT_CUES):
        return Priority.HIGH
    if any(cue in lowered for cue in RAISE_CUES):
        return Priority.MEDIUM if base is Priority.LOW else Priority.HIGH
    if any(cue in lowered for cue in LOWER_CUES):
        return Priority.LOW
    return base


# =============================================================================
# Reminder time references
# =============================================================================

_RELATIVE_OFFSETS = [
    ("today", timedelta(0), "Today"),
    ("tomorrow", timedelta(days=1), "Tomorrow"),
    ("yesterday", timedelta(days=-1), "Yesterday"),
    ("next week", timedelta(weeks=1), "Next week"),
    ("this week", timedelta(0), "This week"),
    ("next month", timedelta(days=30), "Next month"),
    ("this month", timedelta(0), "This month"),
    ("in an hour", timedelta(hours=1), "In 1 hour"),
    ("in two hours", timedelta(hours=2), "In 2 hours"),
    ("in 30 minutes", timedelta(minutes=30), "In 30 minutes"),
]

TIME_OF_DAY_TERMS = [
    "this morning", "this afternoon", "this evening", "tonight",
    "tomorrow morning", "tomorrow afternoon", "tomorrow evening",
    "early morning", "late morning", "early afternoon", "late afternoon",
    "early evening", "late evening", "midnight", "noon",
]

_REMINDER_CLOCK_PATTERNS = [
    re.compile(p, re.IGNORECASE) for p in (
        r"at \d{1,2}(?::\d{2})?(?:am|pm)?",
        r"by \d{1,2}(?::\d{2})?(?:am|pm)?",
        r"\d{1,2}(?::\d{2})?(?:am|pm)",
        r"\d{1,2} o'clock",
    )
]

VAGUE_TERMS = [
    "soon", "later", "eventually", "sometime", "when possible",
    "before", "after", "during", "while", "until", "by then",
]

NO_SPECIFIC_TIME = "No specific time"


def _time_of_day(sentence: str) -> str | None:
    lowered = sentence.lower()
    for term in TIME_OF_DAY_TERMS:
        if term in lowered:
            return term.title()
    for pattern in _REMINDER_CLOCK_PATTERNS:
        match = pattern.search(sentence)
        if match:
            return match.group(0)
    return None


def _vague_time(sentence: str) -> str | None:
    lowered = sentence.lower()
    for term in VAGUE_TERMS:
        if _contains_term(lowered, term):
            return term.title()
    return None


def _next_weekday(now: datetime, weekday: int) -> datetime:
    days_ahead = (weekday - now.weekday()) % 7 or 7
    return now + timedelta(days=days_ahead)


def parse_time_reference(sentence: str, now: datetime | None = None) -> TimeReference:
    """
    Parse the most specific time reference in a reminder sentence.

    Order: relative terms with computable dates, weekday names (next
    occurrence), times of day and clock times, then vague terms. A sentence
    with none of these yields original_text "No specific time".

    Args:
        sentence: Sentence to inspect
        now: Reference moment for relative dates (defaults to datetime.now())
    """
    now = now or datetime.now()
    lowered = sentence.lower()

    for term, offset, relative in _RELATIVE_OFFSETS:
        if _contains_term(lowered, term):
            return TimeReference(original_text=term, parsed_date=now + offset, relative_time=relative)

    for index, day in enumerate(WEEKDAYS):
        if _contains_term(lowered, day):
            target = _next_weekday(now, index)
            same_week = target.isocalendar()[:2] == now.isocalendar()[:2]
            relative = f"{'This' if same_week else 'Next'} {day.title()}"
            return TimeReference(original_text=day, parsed_date=target, relative_time=relative)

    time_of_day = _time_of_day(sentence)
    if time_of_day:
        return TimeReference(original_text=time_of_day, relative_time=time_of_day)

    return TimeReference(original_text=_vague_time(sentence) or NO_SPECIFIC_TIME)


def has_time_context(reference: TimeReference) -> bool:
    return reference.is_specific or reference.original_text != NO_SPECIFIC_TIME


IMMEDIATE_CUES = ["urgent", "asap", "immediately", "right now"]


def determine_urgency(reference: TimeReference, sentence: str, now: datetime | None = None,
                      hint: Urgency | None = None) -> Urgency:
    """
    Urgency of a reminder from explicit cues, then the parsed date, then
    relative wording, then the caller's hint (LATER when there is none).
    """
    lowered = sentence.lower()
    if any(cue in lowered for cue in IMMEDIATE_CUES):
        return Urgency.IMMEDIATE

    if reference.parsed_date is not None:
        now = now or datetime.now()
        seconds = (reference.parsed_date - now).total_seconds()
        if seconds < 3600:
            return Urgency.IMMEDIATE
        if seconds < 86400:
            return Urgency.TODAY
        if seconds < 604800:
            return Urgency.THIS_WEEK

    relative = (reference.relative_time or "").lower()
    if any(term in relative for term in ("today", "this morning", "this afternoon", "tonight")):
        return Urgency.TODAY
    if "tomorrow" in relative or "this week" in relative:
        return Urgency.THIS_WEEK

    original = reference.original_text.lower()
    if "today" in original or _contains_term(original, "now"):
        return Urgency.TODAY
    if "tomorrow" in original or "this week" in original:
        return Urgency.THIS_WEEK

    return hint or Urgency.LATER
