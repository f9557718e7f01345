"""
Extraction of actionable items from transcript text.

    TaskExtractor      - tasks with priority, category and time reference
    ReminderExtractor  - time-sensitive reminders with urgency
    TitleExtractor     - candidate titles for the recording

All extractors split text into sentences, run several independent
strategies per sentence, drop low-confidence candidates, and consolidate
near-duplicates before ranking.
"""

from transcript_digest.extraction.reminder_extractor import ReminderExtractor
from transcript_digest.extraction.task_extractor import TaskExtractor
from transcript_digest.extraction.title_extractor import TitleExtractor

__all__ = ['ReminderExtractor', 'TaskExtractor', 'TitleExtractor']
