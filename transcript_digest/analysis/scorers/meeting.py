"""
Meeting scorer.

Looks for meeting vocabulary, reported speech ("she said", "Speaker 2") and
meeting structure ("action items", "any questions").
"""

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.analysis.scorers import register_scorer
from transcript_digest.analysis.scorers.base import BaseCategoryScorer, compile_patterns

MEETING_KEYWORDS = [
    "meeting", "agenda", "action item", "follow up", "next steps",
    "discuss", "decision", "agree", "disagree", "vote", "consensus",
    "attendees", "participants", "minutes", "schedule", "calendar",
    "presentation", "slides", "demo", "review", "feedback",
    "team", "group", "everyone", "all", "we should", "let's",
    "deadline", "timeline", "milestone", "project", "task assignment",
]

CONVERSATION_INDICATORS = [
    "said", "mentioned", "asked", "replied", "responded", "suggested",
    "john said", "mary mentioned", "bob asked", "she said", "he mentioned",
    "speaker 1", "speaker 2", "speaker 3",
]

STRUCTURE_INDICATORS = [
    "agenda", "minutes", "action items", "next steps", "follow up",
    "decision", "consensus", "vote", "motion", "seconded",
    "meeting adjourned", "meeting ended", "wrap up", "summary",
]

CONVERSATION_FLOW = [
    "what do you think", "do you agree", "any questions", "any concerns",
    "let's discuss", "let's review", "let's go through", "any other business",
]

_SPEAKER_PATTERNS = compile_patterns([
    r"speaker \d+", r"\w+ said", r"\w+ mentioned", r"\w+ asked",
])

_TURN_PATTERNS = compile_patterns([
    r"speaker \d+", r"\w+ said", r"\w+ mentioned", r"\w+ asked", r"\w+ replied",
    r"\w+ suggested", r"\w+ agreed", r"\w+ disagreed", r"\w+ commented",
])


@register_scorer(ContentType.MEETING)
class MeetingScorer(BaseCategoryScorer):
    name = "Meeting"

    def base_score(self, text: str) -> float:
        score = float(self.phrase_hits(text, MEETING_KEYWORDS))
        score += 1.5 * self.phrase_hits(text, CONVERSATION_INDICATORS)

        # A single "x said" is narration; repeated ones suggest several speakers
        for pattern in _SPEAKER_PATTERNS:
            matches = len(pattern.findall(text))
            if matches > 1:
                score += matches * 0.5

        return min(score / 10.0, 1.0)

    def enhancements(self, text: str, original_text: str) -> float:
        speakers = set()
        for pattern in _TURN_PATTERNS:
            speakers.update(match.lower() for match in pattern.findall(original_text))

        score = 0.0
        if len(speakers) > 1:
            score += len(speakers) * 0.2
        score += 0.5 * self.phrase_hits(text, STRUCTURE_INDICATORS)
        score += 0.3 * self.phrase_hits(text, CONVERSATION_FLOW)
        return score
