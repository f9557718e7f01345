"""
TranscriptDigest Configuration Module
Centralized configuration for the digest pipeline.
"""

import os
from pathlib import Path

import yaml

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Application Paths
APP_NAME = "TranscriptDigest"
APPDATA_DIR = Path(os.environ.get('APPDATA', os.path.expanduser('~/.config'))) / APP_NAME
LOGS_DIR = APPDATA_DIR / "logs"

# Ensure directories exist
for directory in [APPDATA_DIR, LOGS_DIR]:
    directory.mkdir(parents=True, exist_ok=True)

# Logging Configuration
LOG_FILE = LOGS_DIR / "processing.log"
DEBUG_FLOW_FILE = LOGS_DIR / "debug_flow.txt"
LOG_FORMAT = "[%(levelname)s %(asctime)s] %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# Transcript Validation
# Texts at or below SHORT_TEXT_WORD_LIMIT are used as-is and never chunked
SHORT_TEXT_WORD_LIMIT = 50
MIN_TRANSCRIPT_WORDS = 10
MAX_TRANSCRIPT_WORDS = 50000
LONG_TRANSCRIPT_WARNING_WORDS = 10000
ERROR_WORD_RATIO_LIMIT = 0.3  # Share of error/failed/timeout words that marks a broken transcript

# Content Classification
# Threshold grows with transcript length and complexity, capped at the max
CLASSIFIER_BASE_THRESHOLD = 0.3
CLASSIFIER_MAX_THRESHOLD = 0.6

# Extraction
# Candidates below this confidence are discarded before consolidation
EXTRACTION_MIN_CONFIDENCE = 0.6
MAX_TASKS = 5
MAX_REMINDERS = 5
MAX_TITLES = 5
TITLE_MIN_CONFIDENCE = 0.7

# Consolidation similarity thresholds (Jaccard word overlap)
# Cross-chunk merging is stricter because candidates come from independent chunks
TASK_SIMILARITY_THRESHOLD = 0.6
REMINDER_SIMILARITY_THRESHOLD = 0.7
CROSS_CHUNK_SIMILARITY_THRESHOLD = 0.8
MERGED_ITEM_LIMIT = 15

# Token Budgets
# Estimates are word + punctuation based, so they run high for plain prose
MAX_TOKENS_PER_CHUNK = 2048
MAX_TOKENS_FOR_FINAL_SUMMARY = 4096
BYTES_PER_TOKEN = 4
WORDS_PER_MINUTE = 150  # Speaking rate used for chunk time estimates

# Chunk Retry Settings
# CHUNK_MAX_RETRIES=2 means three attempts in total; delay = base ** attempt seconds
CHUNK_MAX_RETRIES = 2
CHUNK_BACKOFF_BASE_SECONDS = 2.0

# Chunk Parallelism
# 1 keeps chunk processing sequential; higher values use a thread pool
CHUNK_PARALLEL_WORKERS = max(1, int(os.environ.get('TRANSCRIPT_DIGEST_WORKERS', '1')))

# Default thread pool size when a pool is requested without an explicit size
PARALLEL_DEFAULT_MAX_WORKERS = min(os.cpu_count() or 4, 4)

# Result Cache
# Cost is measured in characters of the cached transcript
CACHE_COUNT_LIMIT = 50
CACHE_COST_LIMIT = 50 * 1024 * 1024

# Resource Policy
# Chunk sizes per optimization level are in bytes
RESOURCE_BALANCED_CHUNK_BYTES = 1024 * 1024
RESOURCE_MEMORY_CHUNK_BYTES = 512 * 1024
RESOURCE_BATTERY_CHUNK_BYTES = 256 * 1024
RESOURCE_BATTERY_INTER_CHUNK_DELAY = 0.1  # Seconds
RESOURCE_LOW_BATTERY_PERCENT = 30
RESOURCE_HIGH_MEMORY_MB = 1024  # Process RSS above this counts as memory pressure
RESOURCE_SYSTEM_MEMORY_CRITICAL_PERCENT = 90  # System RAM usage above this counts as pressure
RESOURCE_POLL_INTERVAL_SECONDS = 30.0

# Memory pressure levels by system RAM usage (percent)
MEMORY_PRESSURE_MODERATE_PERCENT = 75
MEMORY_PRESSURE_HIGH_PERCENT = 85

# AI Engine Configuration
OLLAMA_API_BASE = os.environ.get('OLLAMA_API_BASE', "http://localhost:11434")  # Default Ollama API endpoint
OLLAMA_MODEL_NAME = os.environ.get('OLLAMA_MODEL', "gemma3:1b")
OLLAMA_TIMEOUT_SECONDS = 600  # 10 minutes for long summaries
OLLAMA_CONNECT_TIMEOUT_SECONDS = 5
LOCAL_ENGINE_TIMEOUT_SECONDS = 30

# --- Engine Configuration System ---
ENGINE_CONFIG_FILE = Path(__file__).parent.parent / "config" / "engines.yaml"
ENGINE_CONFIGS = {}


def load_engine_configs():
    """Loads engine configurations from config/engines.yaml."""
    global ENGINE_CONFIGS
    try:
        with open(ENGINE_CONFIG_FILE) as f:
            data = yaml.safe_load(f) or {}
            ENGINE_CONFIGS = data.get('engines', {})
        if DEBUG_MODE and ENGINE_CONFIGS:
            from transcript_digest.logging_config import debug_log
            debug_log(f"[Config] Loaded {len(ENGINE_CONFIGS)} engine configurations from {ENGINE_CONFIG_FILE}")
    except FileNotFoundError:
        if DEBUG_MODE:
            from transcript_digest.logging_config import debug_log
            debug_log(f"[Config] WARNING: Engine config file not found at {ENGINE_CONFIG_FILE}. Using fallback values.")
        ENGINE_CONFIGS = {}
    except Exception as e:
        from transcript_digest.logging_config import debug_log
        debug_log(f"[Config] ERROR: Failed to load or parse engine config file: {e}")
        ENGINE_CONFIGS = {}


def get_engine_config(engine_name: str) -> dict:
    """
    Returns the configuration for a specific engine, with fallbacks.

    Args:
        engine_name: The engine key (e.g., 'local', 'ollama').

    Returns:
        A dictionary containing the engine's configuration.
    """
    if not ENGINE_CONFIGS:
        load_engine_configs()

    if engine_name in ENGINE_CONFIGS:
        return ENGINE_CONFIGS[engine_name]

    if DEBUG_MODE:
        from transcript_digest.logging_config import debug_log
        debug_log(f"[Config] WARNING: No configuration for engine '{engine_name}'. Using hard-coded fallback values.")
    return {
        'max_input_tokens': MAX_TOKENS_PER_CHUNK,
        'timeout_seconds': LOCAL_ENGINE_TIMEOUT_SECONDS,
    }


# Load configs on module import
load_engine_configs()
# --- End Engine Configuration System ---
