"""
Chunk Orchestrator

Turns one transcript into a Digest:

1. Validate the transcript (validation errors surface before any work)
2. Look the transcript up in the result cache
3. Short or in-budget transcripts go to the engine in a single call
4. Larger transcripts are split into chunks; each chunk is processed with
   bounded retries and a per-attempt timeout, and chunks that keep failing
   are skipped rather than failing the run
5. Chunk results are merged and the digest is cached

Chunks run through an ExecutorStrategy (sequential by default). Completion
order never affects the digest because results are merged by sequence.
A run can be cancelled from another thread with cancel(); cancellation
interrupts backoff waits and stops pending chunks, and nothing is cached.
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import replace
from typing import Callable

from transcript_digest.analysis.classifier import ClassificationReport, ContentClassifier
from transcript_digest.analysis.insights import readability_score
from transcript_digest.analysis.tokens import needs_chunking
from transcript_digest.config import (
    BYTES_PER_TOKEN,
    CHUNK_BACKOFF_BASE_SECONDS,
    CHUNK_MAX_RETRIES,
    CHUNK_PARALLEL_WORKERS,
)
from transcript_digest.digest.cache import ResultCache, fingerprint
from transcript_digest.digest.chunker import TranscriptChunk, TranscriptChunker, validate_chunk_plan
from transcript_digest.digest.merger import ChunkMerger
from transcript_digest.digest.result_types import (
    ChunkOutcome,
    ChunkResult,
    ChunkState,
    Digest,
    DigestDiagnostics,
)
from transcript_digest.engines.base import SummarizationEngine
from transcript_digest.errors import (
    ConfigurationRequiredError,
    EngineTimeoutError,
    ProcessingCancelledError,
)
from transcript_digest.logging_config import Timer, debug_log, error, info, warning
from transcript_digest.parallel import ExecutorStrategy, ParallelTaskRunner, create_strategy
from transcript_digest.resource_policy import (
    FixedResourcePolicyProvider,
    ResourcePolicy,
    ResourcePolicyProvider,
)
from transcript_digest.validation import ValidationResult, validate_transcript

ProgressCallback = Callable[[str, int, int, str], None]


class ChunkOrchestrator:
    """
    Coordinates validation, caching, chunking, retries and merging.

    Args:
        engine: Default engine; process_large() may pass another one
        cache: Result cache (a private one is created if omitted)
        policy_provider: Source of resource policies (fixed balanced by default)
        strategy: How chunks are executed (sequential unless configured otherwise)
        max_retries: Retries after the first attempt of each chunk
        backoff_base: Delay before retry n is backoff_base ** n seconds (n from 0)
        sleep: Wait function for backoff and inter-chunk delays; the default
            wakes up early when the run is cancelled
        classifier: Classifier used for whole-transcript confidence
        progress_callback: Called as (phase, current, total, message)
    """

    def __init__(
        self,
        engine: SummarizationEngine | None = None,
        cache: ResultCache | None = None,
        policy_provider: ResourcePolicyProvider | None = None,
        strategy: ExecutorStrategy | None = None,
        max_retries: int = CHUNK_MAX_RETRIES,
        backoff_base: float = CHUNK_BACKOFF_BASE_SECONDS,
        sleep: Callable[[float], None] | None = None,
        classifier: ContentClassifier | None = None,
        progress_callback: ProgressCallback | None = None,
    ):
        self.engine = engine
        self.cache = cache if cache is not None else ResultCache()
        self.policy_provider = policy_provider or FixedResourcePolicyProvider()
        self.strategy = strategy or create_strategy(CHUNK_PARALLEL_WORKERS)
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.classifier = classifier or ContentClassifier()
        self.progress_callback = progress_callback

        # Cancellation support. The stop event is shared by every run in
        # flight and only reset when a run starts while no other is active.
        self._stop_event = threading.Event()
        self._sleep = sleep or self._stop_event.wait
        self._run_lock = threading.Lock()
        self._active_runs = 0

    def cancel(self):
        """Signal the runs in flight to stop. Each raises ProcessingCancelledError."""
        self._stop_event.set()

    stop = cancel

    @property
    def is_cancelled(self) -> bool:
        return self._stop_event.is_set()

    def process_large(self, text: str, engine: SummarizationEngine | None = None) -> Digest:
        """
        Produce a digest for a transcript of any supported length.

        Args:
            text: Transcript text
            engine: Engine to use instead of the orchestrator's default

        Returns:
            Digest. diagnostics.skipped_chunks counts chunks that failed every
            attempt; diagnostics.cache_hit is True when no work was done.

        Raises:
            TranscriptValidationError: Invalid transcript, before any work
            ConfigurationRequiredError: No engine given or configured
            EngineError: The single engine call failed (direct path only)
            ChunkBoundaryError: The chunk plan is malformed
            ProcessingCancelledError: cancel() was called during the run
        """
        engine = engine or self.engine
        if engine is None:
            raise ConfigurationRequiredError("No summarization engine configured.")

        self._begin_run()
        try:
            return self._process(text, engine)
        finally:
            self._end_run()

    def _begin_run(self):
        with self._run_lock:
            if self._active_runs == 0:
                self._stop_event.clear()
            self._active_runs += 1

    def _end_run(self):
        with self._run_lock:
            self._active_runs -= 1

    def _process(self, text: str, engine: SummarizationEngine) -> Digest:
        validation = validate_transcript(text)

        policy = self.policy_provider.current_policy()
        self.cache.resize(count_limit=policy.cache_count_limit)

        key = fingerprint(text, engine.identity)
        digest, hit = self.cache.get_or_compute(
            key,
            lambda: self._build_digest(text, engine, validation, policy),
            cost=len(text),
        )
        if hit:
            info(f"[ChunkOrchestrator] Cache hit for {validation.word_count}-word transcript")
            self._notify_progress("complete", 1, 1, "Loaded digest from cache")
            return replace(digest, diagnostics=replace(digest.diagnostics, cache_hit=True))
        return digest

    # =========================================================================
    # Digest construction
    # =========================================================================

    def _build_digest(self, text: str, engine: SummarizationEngine,
                      validation: ValidationResult, policy: ResourcePolicy) -> Digest:
        timing: dict[str, float] = {}

        with Timer("Classification", auto_log=False) as timer:
            report = self.classifier.analyze(text)
        timing["classification"] = timer.get_duration_ms()

        budget = self.token_budget(engine, policy)
        if validation.is_short or not needs_chunking(text, budget):
            return self._process_direct(text, engine, validation, report, timing)
        return self._process_chunked(text, engine, validation, report, budget, timing)

    @staticmethod
    def token_budget(engine: SummarizationEngine, policy: ResourcePolicy) -> int:
        """Largest chunk the engine and the current resource policy allow."""
        return min(engine.max_input_tokens, policy.chunk_size_bytes // BYTES_PER_TOKEN)

    def _process_direct(self, text: str, engine: SummarizationEngine, validation: ValidationResult,
                        report: ClassificationReport, timing: dict[str, float]) -> Digest:
        debug_log(f"[ChunkOrchestrator] Direct processing of {validation.word_count} words")
        self._notify_progress("processing", 0, 1, "Processing transcript...")

        with Timer("DirectProcessing", auto_log=False) as timer:
            result = self._call_engine(engine, text)
        timing["processing"] = timer.get_duration_ms()

        self._notify_progress("complete", 1, 1, "Digest complete")
        diagnostics = DigestDiagnostics(
            chunk_count=1,
            classification_confidence=report.confidence,
            chunk_states={0: ChunkState.SUCCEEDED},
            timing=timing,
            engine_identity=engine.identity,
            warnings=list(validation.warnings),
        )
        return self._make_digest(text, result, validation, diagnostics)

    def _process_chunked(self, text: str, engine: SummarizationEngine, validation: ValidationResult,
                         report: ClassificationReport, budget: int, timing: dict[str, float]) -> Digest:
        with Timer("Chunking", auto_log=False) as timer:
            chunks = TranscriptChunker(max_tokens=budget).chunk(text)
            validate_chunk_plan(chunks, text, budget)
        timing["chunking"] = timer.get_duration_ms()

        total = len(chunks)
        info(f"[ChunkOrchestrator] Processing {validation.word_count} words in {total} chunks (budget {budget} tokens)")
        self._notify_progress("chunking", total, total, f"Split transcript into {total} chunks")

        with Timer("ChunkProcessing", auto_log=False) as timer:
            outcomes = self._run_chunks(engine, chunks)
        timing["processing"] = timer.get_duration_ms()

        if self._stop_event.is_set():
            raise ProcessingCancelledError()

        succeeded = [(o.sequence, o.result) for o in outcomes if o.state is ChunkState.SUCCEEDED]
        skipped = total - len(succeeded)
        if skipped:
            warning(f"[ChunkOrchestrator] {skipped} of {total} chunks were skipped after repeated failures")

        self._notify_progress("merging", 0, 1, f"Merging {len(succeeded)} chunk results...")
        with Timer("ChunkMerge", auto_log=False) as timer:
            merged = ChunkMerger(engine).merge(succeeded)
        timing["merging"] = timer.get_duration_ms()

        if self._stop_event.is_set():
            raise ProcessingCancelledError()

        self._notify_progress("complete", 1, 1, "Digest complete")
        diagnostics = DigestDiagnostics(
            chunk_count=total,
            skipped_chunks=skipped,
            classification_confidence=report.confidence,
            chunk_states={o.sequence: o.state for o in outcomes},
            timing=timing,
            engine_identity=engine.identity,
            warnings=list(validation.warnings),
        )
        return self._make_digest(text, merged, validation, diagnostics)

    @staticmethod
    def _make_digest(text: str, result: ChunkResult, validation: ValidationResult,
                     diagnostics: DigestDiagnostics) -> Digest:
        digest = Digest(
            summary=result.summary,
            tasks=list(result.tasks),
            reminders=list(result.reminders),
            titles=list(result.titles),
            content_type=result.content_type,
            key_phrases=list(result.key_phrases),
            readability=readability_score(text),
            word_count=validation.word_count,
            original_length=len(text),
            diagnostics=diagnostics,
        )
        info(
            f"[ChunkOrchestrator] Digest ready ({digest.quality_description}): "
            f"summary is {digest.compression_ratio:.0%} of the transcript"
        )
        return digest

    # =========================================================================
    # Chunk execution
    # =========================================================================

    def _run_chunks(self, engine: SummarizationEngine, chunks: list[TranscriptChunk]) -> list[ChunkOutcome]:
        """Process every chunk and return outcomes sorted by sequence."""
        total = len(chunks)
        completed = 0
        progress_lock = threading.Lock()

        def on_task_complete(task_id: str, outcome: ChunkOutcome):
            nonlocal completed
            with progress_lock:
                completed += 1
                done = completed
            self._notify_progress(
                "processing", done, total,
                f"Chunk {outcome.sequence + 1}/{total} {outcome.state.value}"
            )

        runner = ParallelTaskRunner(strategy=self.strategy, on_task_complete=on_task_complete)
        items = [(str(chunk.sequence), chunk) for chunk in chunks]
        task_results = runner.run(lambda chunk: self._process_chunk(engine, chunk), items)

        outcomes: dict[int, ChunkOutcome] = {}
        for task_result in task_results:
            sequence = int(task_result.task_id)
            if task_result.success:
                outcomes[sequence] = task_result.result
            elif isinstance(task_result.error, ProcessingCancelledError):
                self._stop_event.set()
            else:
                error(f"[ChunkOrchestrator] Chunk {sequence} crashed: {task_result.error}")
                outcomes[sequence] = ChunkOutcome(
                    sequence, ChunkState.FAILED, error_message=str(task_result.error)
                )

        return [outcomes[sequence] for sequence in sorted(outcomes)]

    def _process_chunk(self, engine: SummarizationEngine, chunk: TranscriptChunk) -> ChunkOutcome:
        """
        Run one chunk through the engine with bounded retries.

        Engine failures (including timeouts) are absorbed: after the last
        attempt the chunk is reported FAILED. Only cancellation propagates.
        """
        self._check_cancelled()

        delay = self.policy_provider.current_policy().inter_chunk_delay_seconds
        if chunk.sequence > 0 and delay > 0:
            self._sleep(delay)
            self._check_cancelled()

        attempts = self.max_retries + 1
        state = ChunkState.PENDING
        last_error: Exception | None = None

        for attempt in range(attempts):
            state = ChunkState.ATTEMPTING
            try:
                result = self._call_engine(engine, chunk.text)
            except ProcessingCancelledError:
                raise
            except Exception as e:
                last_error = e
                if attempt + 1 < attempts:
                    state = ChunkState.RETRYING
                    backoff = self.backoff_base ** attempt
                    warning(
                        f"[ChunkOrchestrator] Chunk {chunk.sequence} attempt {attempt + 1}/{attempts} "
                        f"failed ({e}); retrying in {backoff:g}s"
                    )
                    self._sleep(backoff)
                    self._check_cancelled()
                continue

            debug_log(f"[ChunkOrchestrator] Chunk {chunk.sequence} succeeded on attempt {attempt + 1}")
            return ChunkOutcome(chunk.sequence, ChunkState.SUCCEEDED, attempts=attempt + 1, result=result)

        error(f"[ChunkOrchestrator] Chunk {chunk.sequence} failed after {attempts} attempts, skipping: {last_error}")
        debug_log(f"[ChunkOrchestrator] Chunk {chunk.sequence} last state {state.value}")
        return ChunkOutcome(
            chunk.sequence, ChunkState.FAILED, attempts=attempts,
            error_message=str(last_error) if last_error else None,
        )

    def _call_engine(self, engine: SummarizationEngine, text: str) -> ChunkResult:
        """One engine call, bounded by engine.timeout_seconds when set."""
        timeout = engine.timeout_seconds
        if not timeout:
            return engine.process_complete(text)

        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="digest-engine")
        try:
            future = executor.submit(engine.process_complete, text)
            try:
                return future.result(timeout=timeout)
            except FutureTimeoutError as e:
                raise EngineTimeoutError(timeout) from e
        finally:
            # A timed out call keeps running in the background; do not wait for it
            executor.shutdown(wait=False)

    def _check_cancelled(self):
        if self._stop_event.is_set():
            raise ProcessingCancelledError()

    def _notify_progress(self, phase: str, current: int, total: int, message: str):
        if not self.progress_callback:
            return
        try:
            self.progress_callback(phase, current, total, message)
        except Exception as e:
            error(f"[ChunkOrchestrator] Progress callback failed: {e}")
