"""Shared fuzzing infrastructure for Atheris-based fuzzers.

Provides the metrics, seed corpus tracking and JSON reporting used by the
arbitraryext fuzz targets. Each target composes its own domain metrics
alongside BaseFuzzerState.

Not a fuzz target itself -- no FUZZ_PLUGIN header.
"""

from __future__ import annotations

import hashlib
import heapq
import json
import os
import pathlib
import statistics
import sys
import time
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

try:
    import psutil
except ImportError:
    psutil = None  # type: ignore[assignment]


# --- PEP 695 Type Aliases ---

type FuzzStats = dict[str, int | str | float | list[Any]]
type SlowInput = tuple[float, str, str]  # (neg_duration_ms, pattern, input_hash)

# --- Constants ---

GC_INTERVAL = 256
"""Periodic gc.collect() interval to reclaim Atheris instrumentation cycles."""

SLOW_INPUT_MS = 50.0
"""Iterations slower than this are kept in the seed corpus."""

MEMORY_GROWTH_LIMIT_MB = 10.0
"""Last-quarter vs first-quarter RSS growth reported as a probable leak."""


# --- Process Handle (lazy singleton) ---

_process: psutil.Process | None = None


def get_process() -> psutil.Process:
    """Lazy-initialize psutil process handle."""
    global _process  # noqa: PLW0603  # pylint: disable=global-statement
    if _process is None:
        _process = psutil.Process(os.getpid())
    return _process


def current_rss_mb() -> float:
    """Resident set size of this process in MiB."""
    return get_process().memory_info().rss / (1024 * 1024)


# --- Dependency Checks ---


def check_dependencies(dep_names: Sequence[str], dep_modules: Sequence[Any]) -> None:
    """Exit with install instructions when a fuzzing dependency is missing.

    Args:
        dep_names: Human-readable names (e.g., ["psutil", "atheris"])
        dep_modules: Corresponding module objects (None if import failed)
    """
    missing = [name for name, mod in zip(dep_names, dep_modules, strict=True) if mod is None]
    if missing:
        print("-" * 80, file=sys.stderr)
        print("ERROR: Missing required dependencies for fuzzing:", file=sys.stderr)
        for dep in missing:
            print(f"  - {dep}", file=sys.stderr)
        print("", file=sys.stderr)
        print("Install with: pip install -e '.[fuzz]'", file=sys.stderr)
        print("-" * 80, file=sys.stderr)
        sys.exit(1)


# --- Base Fuzzer State ---


@dataclass
class BaseFuzzerState:
    """Observability state shared by every arbitraryext fuzz target."""

    iterations: int = 0
    findings: int = 0
    status: str = "incomplete"

    # Bounded histories
    performance_history: deque[float] = field(
        default_factory=lambda: deque(maxlen=10000),
    )
    memory_history: deque[float] = field(
        default_factory=lambda: deque(maxlen=1000),
    )

    # Pattern routing and outcome counts (outcome: "ok", "exhausted", ...)
    pattern_coverage: dict[str, int] = field(default_factory=dict)
    pattern_intended_weights: dict[str, float] = field(default_factory=dict)
    pattern_wall_time: dict[str, float] = field(default_factory=dict)
    outcome_counts: dict[str, int] = field(default_factory=dict)

    # Slowest inputs (min-heap on negated duration) and FIFO seed corpus
    slowest_operations: list[SlowInput] = field(default_factory=list)
    seed_corpus: dict[str, bytes] = field(default_factory=dict)
    corpus_entries_added: int = 0
    corpus_evictions: int = 0

    initial_memory_mb: float = 0.0

    # Configuration
    checkpoint_interval: int = 500
    seed_corpus_max_size: int = 500


# --- Weighted Schedule ---


def build_weighted_schedule(
    items: Sequence[str],
    weights: Sequence[int],
) -> tuple[str, ...]:
    """Expand ``items`` so each appears ``weight`` times, in order."""
    schedule: list[str] = []
    for item, weight in zip(items, weights, strict=True):
        schedule.extend([item] * weight)
    return tuple(schedule)


def select_pattern_round_robin(
    state: BaseFuzzerState,
    schedule: tuple[str, ...],
) -> str:
    """Pick the pattern for this iteration from the weighted schedule.

    Selection uses the iteration counter, not input bytes, so libFuzzer's
    coverage feedback cannot skew the distribution. Callers increment
    state.iterations first, so iteration 1 maps to schedule index 0.
    """
    return schedule[(state.iterations - 1) % len(schedule)]


# --- Per-Iteration Tracking ---


def hash_input(data: bytes) -> str:
    """Truncated SHA-256 hex digest for corpus deduplication."""
    return hashlib.sha256(data).hexdigest()[:16]


def record_outcome(state: BaseFuzzerState, outcome: str) -> None:
    """Count one attempt outcome (``"ok"`` or an error category)."""
    state.outcome_counts[outcome] = state.outcome_counts.get(outcome, 0) + 1


def record_memory(state: BaseFuzzerState) -> None:
    """Sample current RSS memory usage (call every ~100 iterations)."""
    state.memory_history.append(current_rss_mb())


def _track_slowest(state: BaseFuzzerState, duration_ms: float, pattern: str, key: str) -> None:
    entry: SlowInput = (-duration_ms, pattern, key)
    if len(state.slowest_operations) < 10:
        heapq.heappush(state.slowest_operations, entry)
    elif -duration_ms < state.slowest_operations[0][0]:
        heapq.heapreplace(state.slowest_operations, entry)


def _track_seed_corpus(state: BaseFuzzerState, key: str, data: bytes) -> None:
    if key in state.seed_corpus:
        return
    if len(state.seed_corpus) >= state.seed_corpus_max_size:
        del state.seed_corpus[next(iter(state.seed_corpus))]
        state.corpus_evictions += 1
    state.seed_corpus[key] = data
    state.corpus_entries_added += 1


def record_iteration_metrics(
    state: BaseFuzzerState,
    pattern: str,
    start_time: float,
    input_data: bytes,
    *,
    is_interesting: bool,
) -> None:
    """Record timing, slowest-input and corpus metrics for one iteration.

    Call in the finally block of test_one_input.

    Args:
        state: Fuzzer state to update
        pattern: Pattern name for this iteration
        start_time: time.perf_counter() value from iteration start
        input_data: Raw input bytes
        is_interesting: Keep the input in the seed corpus even when fast
    """
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    state.performance_history.append(elapsed_ms)
    state.pattern_wall_time[pattern] = state.pattern_wall_time.get(pattern, 0.0) + elapsed_ms

    key = hash_input(input_data)
    _track_slowest(state, elapsed_ms, pattern, key)
    if is_interesting or elapsed_ms > SLOW_INPUT_MS:
        _track_seed_corpus(state, key, input_data)


# --- Stats Building ---


def _add_performance_stats(state: BaseFuzzerState, stats: FuzzStats) -> None:
    if not state.performance_history:
        return
    perf = list(state.performance_history)
    stats["perf_mean_ms"] = round(statistics.mean(perf), 3)
    stats["perf_median_ms"] = round(statistics.median(perf), 3)
    stats["perf_max_ms"] = round(max(perf), 3)
    if len(perf) >= 100:
        stats["perf_p99_ms"] = round(statistics.quantiles(perf, n=100)[98], 3)


def _add_memory_stats(state: BaseFuzzerState, stats: FuzzStats) -> None:
    if not state.memory_history:
        return
    mem = list(state.memory_history)
    stats["memory_peak_mb"] = round(max(mem), 2)
    stats["memory_delta_mb"] = round(max(mem) - state.initial_memory_mb, 2)
    growth_mb = 0.0
    if len(mem) >= 40:
        quarter = len(mem) // 4
        growth_mb = statistics.mean(mem[-quarter:]) - statistics.mean(mem[:quarter])
    stats["memory_growth_mb"] = round(growth_mb, 2)
    stats["memory_leak_detected"] = 1 if growth_mb > MEMORY_GROWTH_LIMIT_MB else 0


def _add_weight_skew_stats(state: BaseFuzzerState, stats: FuzzStats) -> None:
    """Flag patterns whose share is more than 3x off their intended weight."""
    total_weight = sum(state.pattern_intended_weights.values())
    if total_weight == 0 or state.iterations < 1000:
        stats["weight_skew_detected"] = 0
        return
    skewed: list[str] = []
    for pattern, weight in state.pattern_intended_weights.items():
        intended = weight / total_weight
        actual = state.pattern_coverage.get(pattern, 0) / state.iterations
        if intended > 0 and not 0.33 <= actual / intended <= 3.0:
            skewed.append(pattern)
    stats["weight_skew_detected"] = 1 if skewed else 0
    stats["weight_skew_patterns"] = skewed


def build_base_stats_dict(state: BaseFuzzerState) -> FuzzStats:
    """Common stats dictionary for the JSON report."""
    stats: FuzzStats = {
        "status": state.status,
        "iterations": state.iterations,
        "findings": state.findings,
    }
    _add_performance_stats(state, stats)
    _add_memory_stats(state, stats)

    stats["patterns_tested"] = len(state.pattern_coverage)
    for pattern, count in sorted(state.pattern_coverage.items()):
        stats[f"pattern_{pattern}"] = count
    for pattern, total_ms in sorted(state.pattern_wall_time.items()):
        stats[f"wall_time_ms_{pattern}"] = round(total_ms, 1)
    for outcome, count in sorted(state.outcome_counts.items()):
        stats[f"outcome_{outcome}"] = count

    stats["seed_corpus_size"] = len(state.seed_corpus)
    stats["corpus_entries_added"] = state.corpus_entries_added
    stats["corpus_evictions"] = state.corpus_evictions
    stats["slowest_operations_tracked"] = len(state.slowest_operations)

    _add_weight_skew_stats(state, stats)
    return stats


# --- Reporting ---


def emit_final_report(
    state: BaseFuzzerState,
    stats: FuzzStats,
    report_dir: pathlib.Path,
    report_filename: str,
) -> None:
    """Emit the JSON report to stderr and to ``report_dir / report_filename``.

    File errors are ignored so a report never masks the finding that
    triggered it.
    """
    state.status = "complete"
    report = json.dumps(stats, sort_keys=True)

    print(
        f"\n[SUMMARY-JSON-BEGIN]{report}[SUMMARY-JSON-END]",
        file=sys.stderr,
        flush=True,
    )

    try:
        report_dir.mkdir(parents=True, exist_ok=True)
        (report_dir / report_filename).write_text(report, encoding="utf-8")
    except OSError:
        pass
