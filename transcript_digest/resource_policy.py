"""
Resource Policy Adapter

Maps device conditions (battery, memory) to processing parameters: how
large chunks may be, how many digests the cache keeps, and how long to
pause between chunks. The orchestrator asks a ResourcePolicyProvider for
the current policy and never touches platform APIs itself.

Levels, in priority order:
    battery_optimized - on battery below 30%
    memory_optimized  - process RSS or system memory usage is high
    balanced          - otherwise
"""

import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Callable, NamedTuple

import psutil

from transcript_digest.config import (
    CACHE_COUNT_LIMIT,
    MEMORY_PRESSURE_HIGH_PERCENT,
    MEMORY_PRESSURE_MODERATE_PERCENT,
    RESOURCE_BALANCED_CHUNK_BYTES,
    RESOURCE_BATTERY_CHUNK_BYTES,
    RESOURCE_BATTERY_INTER_CHUNK_DELAY,
    RESOURCE_HIGH_MEMORY_MB,
    RESOURCE_LOW_BATTERY_PERCENT,
    RESOURCE_MEMORY_CHUNK_BYTES,
    RESOURCE_POLL_INTERVAL_SECONDS,
    RESOURCE_SYSTEM_MEMORY_CRITICAL_PERCENT,
)
from transcript_digest.logging_config import debug_log, warning


class OptimizationLevel(Enum):
    BALANCED = "balanced"
    MEMORY_OPTIMIZED = "memory_optimized"
    BATTERY_OPTIMIZED = "battery_optimized"


class MemoryPressure(Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ResourcePolicy:
    level: OptimizationLevel
    chunk_size_bytes: int
    cache_count_limit: int
    inter_chunk_delay_seconds: float


POLICY_TABLE = {
    OptimizationLevel.BALANCED: ResourcePolicy(
        OptimizationLevel.BALANCED, RESOURCE_BALANCED_CHUNK_BYTES, CACHE_COUNT_LIMIT, 0.0
    ),
    OptimizationLevel.MEMORY_OPTIMIZED: ResourcePolicy(
        OptimizationLevel.MEMORY_OPTIMIZED, RESOURCE_MEMORY_CHUNK_BYTES, 30, 0.0
    ),
    OptimizationLevel.BATTERY_OPTIMIZED: ResourcePolicy(
        OptimizationLevel.BATTERY_OPTIMIZED, RESOURCE_BATTERY_CHUNK_BYTES, 25, RESOURCE_BATTERY_INTER_CHUNK_DELAY
    ),
}


class BatteryStatus(NamedTuple):
    percent: float
    power_plugged: bool


class MemoryStatus(NamedTuple):
    process_rss_mb: float
    system_percent: float


def probe_battery() -> BatteryStatus | None:
    """Battery state, or None on machines without a battery."""
    battery = psutil.sensors_battery()
    if battery is None:
        return None
    return BatteryStatus(battery.percent, bool(battery.power_plugged))


def probe_memory() -> MemoryStatus:
    rss_bytes = psutil.Process().memory_info().rss
    return MemoryStatus(rss_bytes / (1024 ** 2), psutil.virtual_memory().percent)


def memory_pressure_for(system_percent: float) -> MemoryPressure:
    if system_percent >= RESOURCE_SYSTEM_MEMORY_CRITICAL_PERCENT:
        return MemoryPressure.CRITICAL
    if system_percent >= MEMORY_PRESSURE_HIGH_PERCENT:
        return MemoryPressure.HIGH
    if system_percent >= MEMORY_PRESSURE_MODERATE_PERCENT:
        return MemoryPressure.MODERATE
    return MemoryPressure.LOW


class ResourcePolicyProvider(ABC):

    @abstractmethod
    def current_policy(self) -> ResourcePolicy:
        """Policy to apply right now."""


class FixedResourcePolicyProvider(ResourcePolicyProvider):
    """Always returns the same policy (balanced unless told otherwise)."""

    def __init__(self, level: OptimizationLevel = OptimizationLevel.BALANCED):
        self.policy = POLICY_TABLE[level]

    def current_policy(self) -> ResourcePolicy:
        return self.policy


class AdaptiveResourcePolicyProvider(ResourcePolicyProvider):
    """
    Chooses a level from live battery and memory readings.

    Readings are refreshed at most once per poll interval; between polls the
    last decision is reused. A failing probe never aborts a run: the
    provider logs it and reports the balanced policy.

    Args:
        battery_probe: Returns BatteryStatus or None (defaults to psutil)
        memory_probe: Returns MemoryStatus (defaults to psutil)
        poll_interval: Minimum seconds between probes
        clock: Monotonic time source
    """

    def __init__(self,
                 battery_probe: Callable[[], BatteryStatus | None] = probe_battery,
                 memory_probe: Callable[[], MemoryStatus] = probe_memory,
                 poll_interval: float = RESOURCE_POLL_INTERVAL_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.battery_probe = battery_probe
        self.memory_probe = memory_probe
        self.poll_interval = poll_interval
        self.clock = clock
        self.memory_pressure_level = MemoryPressure.LOW
        self._policy = POLICY_TABLE[OptimizationLevel.BALANCED]
        self._last_poll: float | None = None
        self._lock = threading.Lock()

    def current_policy(self) -> ResourcePolicy:
        with self._lock:
            now = self.clock()
            if self._last_poll is None or now - self._last_poll >= self.poll_interval:
                self._last_poll = now
                self._policy = POLICY_TABLE[self._determine_level()]
            return self._policy

    def _determine_level(self) -> OptimizationLevel:
        try:
            battery = self.battery_probe()
            memory = self.memory_probe()
        except Exception as e:
            warning(f"[ResourcePolicy] Resource probe failed, using balanced policy: {e}")
            return OptimizationLevel.BALANCED

        self.memory_pressure_level = memory_pressure_for(memory.system_percent)

        if battery is not None and battery.percent < RESOURCE_LOW_BATTERY_PERCENT and not battery.power_plugged:
            level = OptimizationLevel.BATTERY_OPTIMIZED
        elif (memory.process_rss_mb > RESOURCE_HIGH_MEMORY_MB
              or memory.system_percent >= RESOURCE_SYSTEM_MEMORY_CRITICAL_PERCENT):
            level = OptimizationLevel.MEMORY_OPTIMIZED
        else:
            level = OptimizationLevel.BALANCED

        debug_log(
            f"[ResourcePolicy] battery={battery}, rss={memory.process_rss_mb:.0f}MB, "
            f"system={memory.system_percent:.0f}% ({self.memory_pressure_level.value}) -> {level.value}"
        )
        return level
