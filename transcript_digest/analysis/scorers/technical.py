"""
Technical scorer.

Engineering vocabulary plus code-shaped tokens: method calls, versions,
URLs, assignments and definitions.
"""

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.analysis.scorers import register_scorer
from transcript_digest.analysis.scorers.base import BaseCategoryScorer, compile_patterns

TECHNICAL_KEYWORDS = [
    "algorithm", "function", "method", "class", "object", "variable",
    "database", "server", "client", "api", "endpoint", "request", "response",
    "code", "programming", "development", "software", "hardware",
    "system", "architecture", "framework", "library", "module",
    "bug", "error", "exception", "debug", "test", "unit test",
    "deployment", "production", "staging", "environment",
    "performance", "optimization", "scalability", "security",
]

EXPANDED_TECHNICAL_KEYWORDS = [
    "algorithm", "function", "method", "class", "object", "variable", "parameter",
    "database", "server", "client", "api", "endpoint", "request", "response",
    "code", "programming", "development", "software", "hardware", "firmware",
    "system", "architecture", "framework", "library", "module", "package",
    "bug", "error", "exception", "debug", "test", "unit test", "integration test",
    "deployment", "production", "staging", "environment", "configuration",
    "performance", "optimization", "scalability", "security", "authentication",
    "encryption", "compression", "caching", "load balancing", "microservices",
    "container", "docker", "kubernetes", "cloud", "aws", "azure", "gcp",
]

CODE_BLOCK_INDICATORS = [
    "```", "code block", "source code", "implementation", "example code",
]

_CODE_PATTERNS = compile_patterns([
    r"\w+\.\w+\(\)",          # object.method()
    r"\w+\[\d+\]",            # items[3]
    r"if\s+\w+", r"for\s+\w+", r"while\s+\w+",
    r"\d+\.\d+\.\d+",         # versions
    r"http[s]?://",
    r"\w+@\w+\.\w+",
])

_EXTENDED_CODE_PATTERNS = compile_patterns([
    r"\w+\.\w+\(\)",
    r"\w+\[\d+\]",
    r"if\s+\w+", r"for\s+\w+", r"while\s+\w+", r"switch\s+\w+",
    r"\d+\.\d+\.\d+",
    r"http[s]?://[\w\-\.]+",
    r"\w+@[\w\-\.]+\.[a-z]{2,}",
    r"\w+://[\w\-\.]+",
    r"\w+\.\w+\.\w+",         # dotted names and domains
    r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}",
    r"\w+\s*=\s*\w+",
    r"function\s+\w+", r"def\s+\w+", r"class\s+\w+",
])

# Subset used by the classifier's threshold adjustment
DENSITY_KEYWORDS = [
    "algorithm", "function", "method", "class", "object", "variable",
    "database", "server", "client", "api", "endpoint", "code", "programming",
]


@register_scorer(ContentType.TECHNICAL)
class TechnicalScorer(BaseCategoryScorer):
    name = "Technical"

    def base_score(self, text: str) -> float:
        score = float(self.phrase_hits(text, TECHNICAL_KEYWORDS))
        score += 0.5 * self.pattern_matches(_CODE_PATTERNS, text)
        score += self.keyword_density(text, TECHNICAL_KEYWORDS) * 5.0
        return min(score / 10.0, 1.0)

    def enhancements(self, text: str, original_text: str) -> float:
        score = 0.3 * self.pattern_matches(_EXTENDED_CODE_PATTERNS, original_text)
        score += self.keyword_density(original_text, EXPANDED_TECHNICAL_KEYWORDS) * 4.0
        score += 0.5 * self.phrase_hits(text, CODE_BLOCK_INDICATORS)
        return score
