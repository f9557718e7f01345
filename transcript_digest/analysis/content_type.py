"""Content categories a transcript can be classified into."""

from enum import Enum


class ContentType(Enum):
    MEETING = "meeting"
    PERSONAL_JOURNAL = "personal_journal"
    TECHNICAL = "technical"
    GENERAL = "general"

    @property
    def display_name(self) -> str:
        return {
            ContentType.MEETING: "Meeting",
            ContentType.PERSONAL_JOURNAL: "Personal Journal",
            ContentType.TECHNICAL: "Technical",
            ContentType.GENERAL: "General",
        }[self]
