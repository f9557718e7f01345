"""
Task Extractor

Finds actionable tasks in a transcript. Every sentence is run through four
independent strategies, and all of them may contribute candidates:

    1. Pattern      phrase table ("need to call", "must buy", ...); first
                    matching phrase wins
    2. Verb+object  tagged verbs from the action vocabulary, with the rest
                    of the sentence as the object
    3. Imperative   sentences opening with "remember", "make sure", ...
    4. Contextual   trigger words ("action item", "deadline",
                    "shopping list") that route the sentence to a category

Candidates under the minimum confidence are dropped, near-duplicates are
consolidated and the result is ranked and truncated. Extraction never
raises; sentences that match nothing contribute nothing.
"""

import re
from dataclasses import dataclass

from transcript_digest.analysis.text_utils import extract_sentences
from transcript_digest.config import (
    EXTRACTION_MIN_CONFIDENCE,
    MAX_TASKS,
    TASK_SIMILARITY_THRESHOLD,
)
from transcript_digest.extraction.consolidation import (
    consolidate_tasks,
    format_task_string,
    rank_tasks,
)
from transcript_digest.extraction.models import Priority, TaskCategory, TaskItem
from transcript_digest.extraction.tagger import NltkTagger, Tagger
from transcript_digest.extraction.time_references import (
    adjust_priority_for_urgency,
    find_task_time_reference,
)
from transcript_digest.logging_config import debug_log, warning


@dataclass(frozen=True)
class TaskPattern:
    phrase: str
    category: TaskCategory
    priority: Priority
    confidence: float


_H, _M, _L = Priority.HIGH, Priority.MEDIUM, Priority.LOW

TASK_PATTERNS = [
    TaskPattern("need to call", TaskCategory.CALL, _M, 0.9),
    TaskPattern("have to call", TaskCategory.CALL, _H, 0.95),
    TaskPattern("must call", TaskCategory.CALL, _H, 0.95),
    TaskPattern("i need to call", TaskCategory.CALL, _M, 0.9),
    TaskPattern("i have to call", TaskCategory.CALL, _H, 0.95),

    TaskPattern("need to email", TaskCategory.EMAIL, _M, 0.9),
    TaskPattern("have to email", TaskCategory.EMAIL, _M, 0.9),
    TaskPattern("must email", TaskCategory.EMAIL, _H, 0.95),
    TaskPattern("send email to", TaskCategory.EMAIL, _M, 0.9),
    TaskPattern("i need to email", TaskCategory.EMAIL, _M, 0.9),

    TaskPattern("need to schedule", TaskCategory.MEETING, _M, 0.9),
    TaskPattern("have to schedule", TaskCategory.MEETING, _M, 0.9),
    TaskPattern("schedule meeting with", TaskCategory.MEETING, _M, 0.95),
    TaskPattern("book appointment with", TaskCategory.MEETING, _M, 0.9),
    TaskPattern("set up meeting with", TaskCategory.MEETING, _M, 0.9),

    TaskPattern("need to buy", TaskCategory.PURCHASE, _M, 0.9),
    TaskPattern("have to buy", TaskCategory.PURCHASE, _M, 0.9),
    TaskPattern("must buy", TaskCategory.PURCHASE, _H, 0.95),
    TaskPattern("i need to buy", TaskCategory.PURCHASE, _M, 0.9),
    TaskPattern("i have to buy", TaskCategory.PURCHASE, _M, 0.9),
    TaskPattern("pick up", TaskCategory.PURCHASE, _M, 0.6),

    TaskPattern("need to research", TaskCategory.RESEARCH, _L, 0.8),
    TaskPattern("have to research", TaskCategory.RESEARCH, _M, 0.8),
    TaskPattern("look into", TaskCategory.RESEARCH, _L, 0.7),
    TaskPattern("investigate", TaskCategory.RESEARCH, _M, 0.8),
    TaskPattern("find out", TaskCategory.RESEARCH, _L, 0.6),
    TaskPattern("check on", TaskCategory.RESEARCH, _M, 0.7),
    TaskPattern("look up", TaskCategory.RESEARCH, _L, 0.6),
    TaskPattern("study", TaskCategory.RESEARCH, _M, 0.7),

    TaskPattern("need to go", TaskCategory.TRAVEL, _M, 0.7),
    TaskPattern("have to go", TaskCategory.TRAVEL, _M, 0.7),
    TaskPattern("must go", TaskCategory.TRAVEL, _H, 0.8),
    TaskPattern("visit", TaskCategory.TRAVEL, _M, 0.6),
    TaskPattern("travel to", TaskCategory.TRAVEL, _M, 0.8),
    TaskPattern("drive to", TaskCategory.TRAVEL, _M, 0.7),
    TaskPattern("fly to", TaskCategory.TRAVEL, _M, 0.8),

    TaskPattern("doctor appointment", TaskCategory.HEALTH, _M, 0.9),
    TaskPattern("medical appointment", TaskCategory.HEALTH, _H, 0.9),
    TaskPattern("dentist appointment", TaskCategory.HEALTH, _M, 0.9),
    TaskPattern("see doctor", TaskCategory.HEALTH, _M, 0.8),
    TaskPattern("health checkup", TaskCategory.HEALTH, _M, 0.8),
    TaskPattern("prescription", TaskCategory.HEALTH, _M, 0.7),
    TaskPattern("pharmacy", TaskCategory.HEALTH, _M, 0.6),
]

# Verb vocabulary for the verb+object strategy, mapped to task categories
_VERB_CATEGORIES = {
    TaskCategory.CALL: ["call", "phone", "contact"],
    TaskCategory.EMAIL: ["email", "message", "send", "reply", "respond"],
    TaskCategory.MEETING: ["meet", "schedule", "book", "reserve"],
    TaskCategory.PURCHASE: ["buy", "purchase", "order"],
    TaskCategory.RESEARCH: ["research", "investigate", "study", "review", "examine"],
    TaskCategory.TRAVEL: ["visit", "travel", "drive", "fly"],
}
VERB_CATEGORY = {verb: category for category, verbs in _VERB_CATEGORIES.items() for verb in verbs}

ACTION_VERBS = frozenset([
    "complete", "finish", "submit", "deliver", "prepare", "create", "write",
    "review", "update", "fix", "repair", "install", "configure", "setup",
    "organize", "plan", "schedule", "book", "reserve", "confirm", "cancel",
    "send", "receive", "download", "upload", "backup", "restore", "delete",
    "clean", "wash", "cook", "pack", "unpack", "move", "relocate",
]) | frozenset(VERB_CATEGORY)

STRONG_VERBS = frozenset(["complete", "finish", "submit", "deliver", "create", "fix"])

IMPERATIVE_STARTERS = [
    "remember", "don't forget", "make sure", "ensure", "verify", "check",
    "confirm", "validate", "test", "review", "examine", "inspect",
]
STRONG_IMPERATIVES = frozenset(["remember", "don't forget", "make sure"])
CHECKING_IMPERATIVES = frozenset(["check", "verify", "confirm", "validate", "test", "review", "examine", "inspect"])

TASK_PREFIXES = [
    "i need to", "i have to", "i must", "i should", "we need to", "we have to",
    "we must", "we should", "let's", "let me", "i'll", "we'll",
]

NECESSITY_WORDS = ["must", "need", "have to", "required"]
OBJECT_MARKERS = ["with", "about", "for"]


def strip_task_prefix(sentence: str) -> str:
    """Drop one leading filler such as "I need to" and format the rest."""
    cleaned = sentence.strip()
    lowered = cleaned.lower()
    for prefix in TASK_PREFIXES:
        if lowered.startswith(prefix):
            cleaned = cleaned[len(prefix):].strip()
            break
    return format_task_string(cleaned)


class TaskExtractor:
    """
    Extracts ranked TaskItems from transcript text.

    Args:
        tagger: Part-of-speech tagger (defaults to NLTK)
        min_confidence: Candidates below this are discarded
        max_tasks: Number of tasks returned after ranking
        similarity_threshold: Jaccard overlap above which same-category
            tasks are merged
    """

    def __init__(self, tagger: Tagger | None = None,
                 min_confidence: float = EXTRACTION_MIN_CONFIDENCE,
                 max_tasks: int = MAX_TASKS,
                 similarity_threshold: float = TASK_SIMILARITY_THRESHOLD):
        self.tagger = tagger or NltkTagger()
        self.min_confidence = min_confidence
        self.max_tasks = max_tasks
        self.similarity_threshold = similarity_threshold
        self._tagger_warned = False

    def extract(self, text: str) -> list[TaskItem]:
        """
        Extract, consolidate, rank and truncate tasks.

        Returns:
            At most max_tasks items, high priority first, then by confidence
        """
        candidates = []
        for sentence in extract_sentences(text):
            candidates.extend(self.extract_from_sentence(sentence))

        consolidated = consolidate_tasks(candidates, self.similarity_threshold)
        ranked = rank_tasks(consolidated, self.max_tasks)
        debug_log(
            f"[TaskExtractor] {len(candidates)} candidates -> "
            f"{len(consolidated)} after consolidation -> {len(ranked)} returned"
        )
        return ranked

    def extract_from_sentence(self, sentence: str) -> list[TaskItem]:
        candidates = []

        pattern_task = self._pattern_task(sentence)
        if pattern_task:
            candidates.append(pattern_task)

        candidates.extend(self._verb_object_tasks(sentence))

        imperative_task = self._imperative_task(sentence)
        if imperative_task:
            candidates.append(imperative_task)

        candidates.extend(self._contextual_tasks(sentence))

        return [task for task in candidates if task.confidence >= self.min_confidence]

    # --- strategy 1: phrase patterns ---

    def _pattern_task(self, sentence: str) -> TaskItem | None:
        lowered = sentence.lower()
        for pattern in TASK_PATTERNS:
            if pattern.phrase in lowered:
                time_reference = find_task_time_reference(sentence)
                return TaskItem(
                    text=strip_task_prefix(sentence),
                    priority=adjust_priority_for_urgency(pattern.priority, sentence),
                    category=pattern.category,
                    confidence=self._pattern_confidence(sentence, pattern.confidence, time_reference),
                    time_reference=time_reference,
                )
        return None

    @staticmethod
    def _pattern_confidence(sentence: str, base: float, time_reference: str | None) -> float:
        confidence = base
        lowered = sentence.lower()
        if any(word in lowered for word in NECESSITY_WORDS):
            confidence += 0.1
        if any(marker in sentence for marker in OBJECT_MARKERS):
            confidence += 0.1
        if time_reference is not None:
            confidence += 0.1
        return min(confidence, 1.0)

    # --- strategy 2: verb + object ---

    def _tag(self, sentence: str) -> list[tuple[str, str]]:
        try:
            return self.tagger.tag(sentence)
        except LookupError as e:
            if not self._tagger_warned:
                warning(f"[TaskExtractor] Tagger data unavailable, using sentence-initial verbs only: {e}")
                self._tagger_warned = True
            leading = re.match(r"[A-Za-z']+", sentence.strip())
            return [(leading.group(0), "VB")] if leading else []

    def _verb_object_tasks(self, sentence: str) -> list[TaskItem]:
        tagged = self._tag(sentence)
        first_word = sentence.strip().split(maxsplit=1)[0].lower() if sentence.strip() else ""

        tasks = []
        search_from = 0
        for index, (token, tag) in enumerate(tagged):
            verb = token.lower()
            if verb not in ACTION_VERBS:
                continue

            # Imperatives at the start of a sentence are often tagged as nouns
            is_leading = index == 0 and verb == first_word
            if not (Tagger.is_verb(tag) or is_leading):
                continue

            match = re.compile(rf"\b{re.escape(token)}\b", re.IGNORECASE).search(sentence, search_from)
            if match is None:
                continue
            search_from = match.end()

            remainder = sentence[match.end():].strip()
            if not remainder:
                continue

            confidence = 0.6
            if verb in STRONG_VERBS:
                confidence += 0.2
            lowered = sentence.lower()
            if "need" in lowered or "must" in lowered:
                confidence += 0.1

            tasks.append(TaskItem(
                text=format_task_string(f"{verb.capitalize()} {remainder}"),
                priority=adjust_priority_for_urgency(Priority.MEDIUM, sentence),
                category=VERB_CATEGORY.get(verb, TaskCategory.GENERAL),
                confidence=min(confidence, 1.0),
                time_reference=find_task_time_reference(sentence),
            ))
        return tasks

    # --- strategy 3: imperatives ---

    def _imperative_task(self, sentence: str) -> TaskItem | None:
        trimmed = sentence.strip()
        lowered = trimmed.lower()
        for starter in IMPERATIVE_STARTERS:
            if lowered.startswith(starter):
                confidence = 0.7 + (0.2 if starter in STRONG_IMPERATIVES else 0.0)
                category = TaskCategory.RESEARCH if starter in CHECKING_IMPERATIVES else TaskCategory.GENERAL
                return TaskItem(
                    text=format_task_string(trimmed),
                    priority=adjust_priority_for_urgency(Priority.MEDIUM, sentence),
                    category=category,
                    confidence=min(confidence, 1.0),
                    time_reference=find_task_time_reference(sentence),
                )
        return None

    # --- strategy 4: contextual triggers ---

    def _contextual_tasks(self, sentence: str) -> list[TaskItem]:
        lowered = sentence.lower()
        text = format_task_string(sentence)
        time_reference = find_task_time_reference(sentence)
        tasks = []

        if any(trigger in lowered for trigger in ("action item", "follow up", "next step")):
            tasks.append(TaskItem(
                text=text,
                priority=adjust_priority_for_urgency(Priority.MEDIUM, sentence),
                category=TaskCategory.MEETING,
                confidence=0.8,
                time_reference=time_reference,
            ))

        if any(trigger in lowered for trigger in ("deadline", "due", "milestone")):
            tasks.append(TaskItem(
                text=text,
                priority=Priority.HIGH if "deadline" in lowered else Priority.MEDIUM,
                category=TaskCategory.GENERAL,
                confidence=0.7,
                time_reference=time_reference,
            ))

        if any(trigger in lowered for trigger in ("shopping list", "grocery", "store")):
            tasks.append(TaskItem(
                text=text,
                priority=Priority.LOW,
                category=TaskCategory.PURCHASE,
                confidence=0.6,
                time_reference=time_reference,
            ))

        return tasks
