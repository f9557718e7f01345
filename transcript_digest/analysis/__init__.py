"""Text analysis: content classification, sentence importance and insights."""
