"""
Ollama-backed engine.

Extraction (tasks, reminders, titles) and classification run locally; only
the summary text is produced by a model served through Ollama's REST API.
Transport failures are mapped onto the engine error taxonomy so the
orchestrator can retry and skip chunks without knowing about HTTP.
"""

import time

import requests

from transcript_digest.analysis.content_type import ContentType
from transcript_digest.config import (
    OLLAMA_API_BASE,
    OLLAMA_CONNECT_TIMEOUT_SECONDS,
    OLLAMA_MODEL_NAME,
    OLLAMA_TIMEOUT_SECONDS,
    get_engine_config,
)
from transcript_digest.engines.local_engine import LocalEngine
from transcript_digest.errors import (
    ConfigurationRequiredError,
    EngineResponseError,
    EngineTimeoutError,
    EngineUnavailableError,
)
from transcript_digest.extraction.tagger import Tagger
from transcript_digest.logging_config import debug_log, warning

PROMPT_FOCUS = {
    ContentType.MEETING: "decisions made, owners of action items and deadlines",
    ContentType.PERSONAL_JOURNAL: "the main experiences, feelings and intentions",
    ContentType.TECHNICAL: "the technical problem, the approach taken and its outcome",
    ContentType.GENERAL: "the main points",
}


def build_summary_prompt(text: str, content_type: ContentType) -> str:
    focus = PROMPT_FOCUS.get(content_type, PROMPT_FOCUS[ContentType.GENERAL])
    return (
        f"Summarize the following {content_type.display_name.lower()} transcript in a few sentences. "
        f"Focus on {focus}. Do not invent details.\n\n"
        f"TRANSCRIPT:\n{text}\n\nSUMMARY:"
    )


class OllamaEngine(LocalEngine):
    """
    Summarizes with an Ollama model.

    Args:
        model_name: Ollama model tag (defaults to config)
        api_base: Ollama server URL
        tagger: POS tagger for local extraction
    """

    name = "ollama"
    version = "1.0"
    config_key = "ollama"

    def __init__(self, model_name: str | None = None, api_base: str = OLLAMA_API_BASE,
                 tagger: Tagger | None = None):
        super().__init__(tagger=tagger)
        config = get_engine_config(self.config_key)
        self.model_name = model_name or config.get('model') or OLLAMA_MODEL_NAME
        if not self.model_name:
            raise ConfigurationRequiredError("No Ollama model configured.")
        self.api_base = api_base.rstrip("/")
        self.context_window = config.get('context_window', 4096)
        self.temperature = config.get('temperature', 0.3)
        self.summary_max_tokens = config.get('summary_max_tokens', 400)
        self.request_timeout = config.get('timeout_seconds', OLLAMA_TIMEOUT_SECONDS)
        self.is_connected = False

    @property
    def identity(self) -> str:
        return f"{self.name}:{self.version}:{self.model_name}"

    def is_available(self) -> bool:
        """Check that the Ollama server answers /api/tags."""
        try:
            response = requests.get(f"{self.api_base}/api/tags", timeout=OLLAMA_CONNECT_TIMEOUT_SECONDS)
            self.is_connected = response.status_code == 200
            if not self.is_connected:
                debug_log(f"[Ollama] Connection failed: Status {response.status_code}")
        except requests.exceptions.RequestException as e:
            debug_log(f"[Ollama] Connection error: Cannot reach {self.api_base} ({e})")
            self.is_connected = False
        return self.is_connected

    def summarize(self, text: str, content_type: ContentType) -> str:
        return self.generate_text(build_summary_prompt(text, content_type), self.summary_max_tokens)

    def generate_text(self, prompt: str, max_tokens: int) -> str:
        """
        Run one non-streaming /api/generate request.

        Raises:
            EngineTimeoutError: The request exceeded the configured timeout
            EngineUnavailableError: The server could not be reached
            EngineResponseError: Non-200 status or an empty/invalid response
        """
        estimated_tokens = len(prompt) // 4
        if estimated_tokens > self.context_window - max_tokens:
            warning(
                f"Prompt ({estimated_tokens} estimated tokens) may be truncated. "
                f"Context window is {self.context_window} tokens."
            )

        payload = {
            "model": self.model_name,
            "prompt": prompt,
            "stream": False,
            "options": {
                "num_ctx": self.context_window,
                "num_predict": max_tokens,
                "temperature": self.temperature,
            },
        }
        debug_log(f"[Ollama] Generating with {self.model_name}: {len(prompt)} chars, max {max_tokens} tokens")

        start_time = time.time()
        try:
            response = requests.post(
                f"{self.api_base}/api/generate",
                json=payload,
                timeout=self.request_timeout
            )
        except requests.exceptions.Timeout as e:
            raise EngineTimeoutError(self.request_timeout) from e
        except requests.exceptions.ConnectionError as e:
            raise EngineUnavailableError(
                "Ollama", f"Cannot connect to {self.api_base}. Is Ollama running? Start with: ollama serve"
            ) from e

        if response.status_code != 200:
            raise EngineResponseError(f"Ollama returned status {response.status_code}: {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            raise EngineResponseError(f"Ollama returned invalid JSON: {e}") from e

        generated_text = result.get('response', '').strip()
        if not generated_text:
            raise EngineResponseError("Ollama returned an empty response.")

        debug_log(
            f"[Ollama] Generation complete: {result.get('eval_count', 0)} tokens "
            f"in {time.time() - start_time:.2f}s"
        )
        return generated_text
