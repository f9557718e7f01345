"""
TranscriptDigest - structured digests of spoken transcripts.

Classifies a transcript, extracts tasks, reminders and candidate titles,
and summarizes it, splitting transcripts that are too large for the
engine into chunks that are processed with retries and merged.

    from transcript_digest import ChunkOrchestrator, LocalEngine

    orchestrator = ChunkOrchestrator(engine=LocalEngine())
    digest = orchestrator.process_large(transcript_text)
    for task in digest.tasks:
        print(task.priority.value, task.text)
"""

from transcript_digest.analysis.classifier import ContentClassifier, classify
from transcript_digest.analysis.content_type import ContentType
from transcript_digest.digest.cache import ResultCache
from transcript_digest.digest.orchestrator import ChunkOrchestrator
from transcript_digest.digest.result_types import ChunkResult, Digest, DigestDiagnostics
from transcript_digest.engines import LocalEngine, OllamaEngine, SummarizationEngine
from transcript_digest.errors import DigestError
from transcript_digest.resource_policy import (
    AdaptiveResourcePolicyProvider,
    FixedResourcePolicyProvider,
    ResourcePolicy,
)

__version__ = "0.1.0"

__all__ = [
    'AdaptiveResourcePolicyProvider',
    'ChunkOrchestrator',
    'ChunkResult',
    'ContentClassifier',
    'ContentType',
    'Digest',
    'DigestDiagnostics',
    'DigestError',
    'FixedResourcePolicyProvider',
    'LocalEngine',
    'OllamaEngine',
    'ResourcePolicy',
    'ResultCache',
    'SummarizationEngine',
    'classify',
]
