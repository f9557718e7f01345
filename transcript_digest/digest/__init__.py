"""
Digest pipeline building blocks.

The orchestrator and merger live in their own modules
(transcript_digest.digest.orchestrator, transcript_digest.digest.merger)
because they depend on the engines package, which itself uses these
result types.
"""

from transcript_digest.digest.cache import ResultCache, fingerprint
from transcript_digest.digest.chunker import TranscriptChunk, TranscriptChunker, validate_chunk_plan
from transcript_digest.digest.result_types import (
    ChunkOutcome,
    ChunkResult,
    ChunkState,
    Digest,
    DigestDiagnostics,
)

__all__ = [
    'ChunkOutcome',
    'ChunkResult',
    'ChunkState',
    'Digest',
    'DigestDiagnostics',
    'ResultCache',
    'TranscriptChunk',
    'TranscriptChunker',
    'fingerprint',
    'validate_chunk_plan',
]
