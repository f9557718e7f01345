"""
Content Category Scorers

Each scorer is registered against a ContentType and can be looked up or
instantiated by that type. The classifier consults every registered scorer
in registration order, so adding a category means adding one module here.

Usage:
    from transcript_digest.analysis.scorers import create_default_scorers, score_text

    scorers = create_default_scorers()
    meeting = score_text(ContentType.MEETING, normalized, original)

Registration:
    @register_scorer(ContentType.MEETING)
    class MeetingScorer(BaseCategoryScorer):
        name = "Meeting"
        ...
"""

from typing import Type

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.analysis.scorers.base import BaseCategoryScorer

# Registry of scorer classes keyed by the category they score (insertion ordered)
_SCORER_REGISTRY: dict[ContentType, Type[BaseCategoryScorer]] = {}


def register_scorer(content_type: ContentType):
    """
    Decorator to register a scorer class for a content category.

    Args:
        content_type: Category scored by the decorated class

    Raises:
        ValueError: If the category already has a scorer, or is GENERAL
            (general is the classifier's fallback, never scored directly)
    """
    def decorator(cls: Type[BaseCategoryScorer]) -> Type[BaseCategoryScorer]:
        if content_type is ContentType.GENERAL:
            raise ValueError("ContentType.GENERAL is the fallback category and cannot be scored")
        if content_type in _SCORER_REGISTRY:
            raise ValueError(
                f"Scorer for '{content_type.value}' is already registered. "
                f"Existing: {_SCORER_REGISTRY[content_type].__name__}, New: {cls.__name__}"
            )
        cls.content_type = content_type
        _SCORER_REGISTRY[content_type] = cls
        return cls
    return decorator


def _load_builtin_scorers():
    # Import order fixes registration order: meeting, journal, technical.
    # Ties in the classifier go to the earliest registered category.
    from transcript_digest.analysis.scorers import meeting  # noqa: F401
    from transcript_digest.analysis.scorers import journal  # noqa: F401
    from transcript_digest.analysis.scorers import technical  # noqa: F401


def get_scorer(content_type: ContentType, **kwargs) -> BaseCategoryScorer:
    """
    Instantiate the scorer registered for a category.

    Raises:
        KeyError: If no scorer is registered for the category
    """
    _load_builtin_scorers()
    if content_type not in _SCORER_REGISTRY:
        available = ", ".join(ct.value for ct in _SCORER_REGISTRY)
        raise KeyError(
            f"No scorer for '{content_type.value}'. Available scorers: {available or '(none registered)'}"
        )
    return _SCORER_REGISTRY[content_type](**kwargs)


def get_available_scorers() -> list[ContentType]:
    """Registered categories in classifier order."""
    _load_builtin_scorers()
    return list(_SCORER_REGISTRY.keys())


def create_default_scorers() -> list[BaseCategoryScorer]:
    """Instances of every enabled registered scorer, in classifier order."""
    _load_builtin_scorers()
    scorers = [cls() for cls in _SCORER_REGISTRY.values()]
    return [scorer for scorer in scorers if scorer.enabled]


def score_text(content_type: ContentType, normalized_text: str, original_text: str) -> float:
    """
    Score text against one category.

    Unregistered categories (including GENERAL) score 0.
    """
    _load_builtin_scorers()
    cls = _SCORER_REGISTRY.get(content_type)
    if cls is None:
        return 0.0
    return cls().score(normalized_text, original_text)


__all__ = [
    'BaseCategoryScorer',
    'create_default_scorers',
    'get_available_scorers',
    'get_scorer',
    'register_scorer',
    'score_text',
]
