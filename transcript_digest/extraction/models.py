"""
Extracted item types.

Items are frozen: consolidation builds a new merged item rather than
mutating any member of a group, and sorting never touches confidence.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class Priority(Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def sort_order(self) -> int:
        return {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}[self]


class TaskCategory(Enum):
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    PURCHASE = "purchase"
    RESEARCH = "research"
    TRAVEL = "travel"
    HEALTH = "health"
    GENERAL = "general"


class Urgency(Enum):
    IMMEDIATE = "immediate"
    TODAY = "today"
    THIS_WEEK = "this_week"
    LATER = "later"

    @property
    def sort_order(self) -> int:
        return {Urgency.IMMEDIATE: 0, Urgency.TODAY: 1, Urgency.THIS_WEEK: 2, Urgency.LATER: 3}[self]


class TitleCategory(Enum):
    MEETING = "meeting"
    PERSONAL = "personal"
    TECHNICAL = "technical"
    GENERAL = "general"


def _clamp(confidence: float) -> float:
    return max(0.0, min(1.0, confidence))


@dataclass(frozen=True)
class TaskItem:
    """
    An actionable task found in a transcript.

    Attributes:
        text: Formatted task sentence ("Call Bob tomorrow about the contract.")
        priority: HIGH, MEDIUM or LOW
        category: What kind of action this is
        confidence: Extraction confidence (0.0-1.0)
        time_reference: Capitalized relative term or clock time, if any
    """
    text: str
    priority: Priority
    category: TaskCategory
    confidence: float
    time_reference: str | None = None

    def __post_init__(self):
        object.__setattr__(self, "confidence", _clamp(self.confidence))


@dataclass(frozen=True)
class TimeReference:
    """
    When a reminder is due.

    Attributes:
        original_text: Phrase found in the sentence ("tomorrow", "at 3pm")
        parsed_date: Concrete moment, when one could be computed
        relative_time: Display form ("Tomorrow", "Next Friday")
    """
    original_text: str
    parsed_date: datetime | None = None
    relative_time: str | None = None

    @property
    def is_specific(self) -> bool:
        return self.parsed_date is not None

    @property
    def display_text(self) -> str:
        if self.relative_time:
            return self.relative_time
        if self.parsed_date is not None:
            return self.parsed_date.strftime("%b %d, %Y %H:%M")
        return self.original_text


@dataclass(frozen=True)
class ReminderItem:
    """A time-sensitive reminder; urgency plays the role of priority."""
    text: str
    time_reference: TimeReference
    urgency: Urgency
    confidence: float

    def __post_init__(self):
        object.__setattr__(self, "confidence", _clamp(self.confidence))


@dataclass(frozen=True)
class TitleItem:
    """Candidate title for the transcript."""
    text: str
    confidence: float
    category: TitleCategory = TitleCategory.GENERAL

    def __post_init__(self):
        object.__setattr__(self, "confidence", _clamp(self.confidence))
