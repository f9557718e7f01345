"""Summarization engines."""

from transcript_digest.engines.base import SummarizationEngine
from transcript_digest.engines.local_engine import LocalEngine
from transcript_digest.engines.ollama_engine import OllamaEngine

__all__ = ['LocalEngine', 'OllamaEngine', 'SummarizationEngine']
