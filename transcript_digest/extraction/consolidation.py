"""
Similarity-based consolidation of extracted items.

Near-duplicate tasks, reminders and titles are grouped and each group is
replaced by one merged item. Grouping is greedy: each surviving group is
compared against the groups after it that have not been absorbed yet.
Passes repeat until nothing merges, and a merged item is always rebuilt
from the original members, so a merged confidence is the mean over every
member and consolidating an already consolidated list changes nothing.

Similarity thresholds are parameters: 0.6 within one extraction run, 0.8
when combining results from independent chunks.
"""

from typing import Callable, TypeVar

from transcript_digest.analysis.text_utils import jaccard_similarity
from transcript_digest.config import (
    REMINDER_SIMILARITY_THRESHOLD,
    TASK_SIMILARITY_THRESHOLD,
)
from transcript_digest.extraction.models import ReminderItem, TaskItem, TitleItem
from transcript_digest.extraction.time_references import has_time_context

T = TypeVar("T")


def format_task_string(text: str) -> str:
    """Capitalize the first letter and make sure the text ends with . ! or ?"""
    formatted = text.strip()
    if not formatted:
        return formatted
    formatted = formatted[0].upper() + formatted[1:]
    if not formatted.endswith((".", "!", "?")):
        formatted += "."
    return formatted


def consolidate(items: list[T], similar: Callable[[T, T], bool],
                merge: Callable[[list[T]], T]) -> list[T]:
    """
    Group similar items and merge each group.

    Args:
        items: Candidates in a deterministic order
        similar: Symmetric similarity predicate on two (possibly merged) items
        merge: Builds one item from a group of original items; must return the
            item itself for a single-member group

    Returns:
        One item per group, in order of each group's first member
    """
    groups = [[item] for item in items]

    merged_any = True
    while merged_any:
        merged_any = False
        next_groups = []
        absorbed = set()
        for i, group in enumerate(groups):
            if i in absorbed:
                continue
            current = list(group)
            representative = merge(current)
            for j in range(i + 1, len(groups)):
                if j in absorbed:
                    continue
                if similar(representative, merge(groups[j])):
                    current.extend(groups[j])
                    absorbed.add(j)
                    merged_any = True
            next_groups.append(current)
        groups = next_groups

    return [merge(group) for group in groups]


def _mean_confidence(items) -> float:
    return sum(item.confidence for item in items) / len(items)


# =============================================================================
# Tasks
# =============================================================================

def tasks_similar(first: TaskItem, second: TaskItem, threshold: float = TASK_SIMILARITY_THRESHOLD) -> bool:
    return first.category == second.category and jaccard_similarity(first.text, second.text) > threshold


def merge_tasks(group: list[TaskItem]) -> TaskItem:
    """Longest text, highest priority, mean confidence, first time reference."""
    if len(group) == 1:
        return group[0]
    longest = max(group, key=lambda task: len(task.text))
    return TaskItem(
        text=format_task_string(longest.text),
        priority=min((task.priority for task in group), key=lambda p: p.sort_order),
        category=group[0].category,
        confidence=_mean_confidence(group),
        time_reference=next((t.time_reference for t in group if t.time_reference), None),
    )


def consolidate_tasks(tasks: list[TaskItem], threshold: float = TASK_SIMILARITY_THRESHOLD) -> list[TaskItem]:
    return consolidate(tasks, lambda a, b: tasks_similar(a, b, threshold), merge_tasks)


def rank_tasks(tasks: list[TaskItem], limit: int | None = None) -> list[TaskItem]:
    """Sort by priority (high first) then confidence, and truncate."""
    ranked = sorted(tasks, key=lambda task: (task.priority.sort_order, -task.confidence))
    return ranked if limit is None else ranked[:limit]


# =============================================================================
# Reminders
# =============================================================================

def reminders_similar(first: ReminderItem, second: ReminderItem,
                      threshold: float = REMINDER_SIMILARITY_THRESHOLD,
                      match_time_text: bool = True) -> bool:
    """
    Similar when the texts overlap above the threshold, or (within a single
    run) when both point at the same concrete time phrase. Reminders without
    any time context only merge on text overlap.
    """
    if jaccard_similarity(first.text, second.text) > threshold:
        return True
    if match_time_text and has_time_context(first.time_reference) and has_time_context(second.time_reference):
        return first.time_reference.original_text.lower() == second.time_reference.original_text.lower()
    return False


def merge_reminders(group: list[ReminderItem]) -> ReminderItem:
    """Most confident text, most urgent urgency, a specific time if any, mean confidence."""
    if len(group) == 1:
        return group[0]
    best = max(group, key=lambda reminder: reminder.confidence)
    time_reference = next(
        (r.time_reference for r in group if r.time_reference.is_specific),
        best.time_reference,
    )
    return ReminderItem(
        text=best.text,
        time_reference=time_reference,
        urgency=min((r.urgency for r in group), key=lambda u: u.sort_order),
        confidence=_mean_confidence(group),
    )


def consolidate_reminders(reminders: list[ReminderItem],
                          threshold: float = REMINDER_SIMILARITY_THRESHOLD,
                          match_time_text: bool = True) -> list[ReminderItem]:
    return consolidate(
        reminders,
        lambda a, b: reminders_similar(a, b, threshold, match_time_text),
        merge_reminders,
    )


def rank_reminders(reminders: list[ReminderItem], limit: int | None = None) -> list[ReminderItem]:
    ranked = sorted(reminders, key=lambda r: (r.urgency.sort_order, -r.confidence))
    return ranked if limit is None else ranked[:limit]


# =============================================================================
# Titles
# =============================================================================

def titles_similar(first: TitleItem, second: TitleItem, threshold: float = TASK_SIMILARITY_THRESHOLD) -> bool:
    return first.category == second.category and jaccard_similarity(first.text, second.text) > threshold


def merge_titles(group: list[TitleItem]) -> TitleItem:
    if len(group) == 1:
        return group[0]
    longest = max(group, key=lambda title: len(title.text))
    return TitleItem(text=longest.text, confidence=_mean_confidence(group), category=group[0].category)


def consolidate_titles(titles: list[TitleItem], threshold: float = TASK_SIMILARITY_THRESHOLD) -> list[TitleItem]:
    return consolidate(titles, lambda a, b: titles_similar(a, b, threshold), merge_titles)


def rank_titles(titles: list[TitleItem], limit: int | None = None) -> list[TitleItem]:
    ranked = sorted(titles, key=lambda title: -title.confidence)
    return ranked if limit is None else ranked[:limit]
