#!/usr/bin/env python3
# FUZZ_PLUGIN_HEADER_START
# FUZZ_PLUGIN: generate - Generation contract (determinism, failure surface)
# Intentional: This header is intentionally placed for dynamic plugin discovery.
# CRITICAL: DO NOT REMOVE THIS HEADER
# FUZZ_PLUGIN_HEADER_END
"""Generation Contract Fuzzer (Atheris).

Feeds raw libFuzzer bytes straight into arbitraryext (the library is its
own data provider) and checks the contract every generation attempt must
honour:

- Outcome is a value, InputExhaustedError or RecursionLimitExceededError.
  IncorrectUsageError or any other exception is a finding.
- Identical bytes give identical values and identical final offsets.
- The attempt's recursion counters are back at zero afterwards.
- Bounded byte strings and text are prefixes of the input.

Patterns:
- grammar_bounded: recursive expression grammar, bounded mode
- grammar_take_rest: same grammar, consume-remaining mode
- nested_collections: maps of optional lists, sorted containers, heaps
- primitives: bytes / str prefix invariants, float and int decoding
- determinism: double run comparison on the grammar

Pattern Routing:
Round-robin over a weighted schedule (iteration counter based), so
libFuzzer feedback cannot skew the pattern mix.

Metrics:
- Pattern coverage and weight skew detection
- Outcome distribution (ok / exhausted / recursion)
- Performance profiling, RSS memory via psutil, seed corpus

Requires Python 3.13+.
"""

from __future__ import annotations

import argparse
import atexit
import enum
import gc
import logging
import pathlib
import sys
import time
from dataclasses import dataclass
from typing import Any

# --- Dependency Checks ---
_psutil_mod: Any = None
_atheris_mod: Any = None

try:  # noqa: SIM105 - need module ref for check_dependencies
    import psutil as _psutil_mod  # type: ignore[no-redef]
except ImportError:
    pass

try:  # noqa: SIM105 - need module ref for check_dependencies
    import atheris as _atheris_mod  # type: ignore[no-redef]
except ImportError:
    pass

from fuzz_common import (  # noqa: E402 - after dependency capture  # pylint: disable=C0413
    GC_INTERVAL,
    BaseFuzzerState,
    build_base_stats_dict,
    build_weighted_schedule,
    check_dependencies,
    current_rss_mb,
    emit_final_report,
    record_iteration_metrics,
    record_memory,
    record_outcome,
    select_pattern_round_robin,
)

check_dependencies(["psutil", "atheris"], [_psutil_mod, _atheris_mod])

import atheris  # noqa: E402  # pylint: disable=C0412,C0413

with atheris.instrument_imports():
    from arbitraryext import (
        ArbitraryError,
        IncorrectUsageError,
        derive,
    )
    from arbitraryext.containers import MaxHeap, SortedDict, SortedSet
    from arbitraryext.core import Cursor
    from arbitraryext.primitives import arbitrary_bytes, arbitrary_float, arbitrary_str


# --- Target Types ---


class Op(enum.Enum):
    NEG = "-"
    NOT = "!"
    ADD = "+"


@dataclass(frozen=True)
class Unary:
    op: Op
    operand: Expr


@dataclass(frozen=True)
class Binary:
    left: Expr
    right: Expr


@dataclass(frozen=True)
class Call:
    name: str
    args: tuple[Expr, ...]
    kwargs: dict[str, Expr]


@dataclass(frozen=True)
class Const:
    value: int | float | bytes | None


# Recursive variants first: exhausted input always selects Unary.
Expr = Unary | Binary | Call | Const

NestedCollections = tuple[
    dict[str, list[int | None]],
    SortedSet[int],
    SortedDict[bytes, frozenset[bool]],
    MaxHeap[int],
]


# --- Domain Metrics ---


@dataclass
class GenerateMetrics:
    """Domain-specific metrics for the generation contract fuzzer."""

    values_built: int = 0
    exhausted: int = 0
    recursion_limited: int = 0
    python_recursion_errors: int = 0
    bytes_consumed_total: int = 0


# --- Global State ---

_state = BaseFuzzerState(seed_corpus_max_size=1000)
_domain = GenerateMetrics()

# Python's own stack limit is an accepted outcome for very deep inputs.
ALLOWED_EXCEPTIONS = (RecursionError,)

_PATTERN_WEIGHTS: tuple[tuple[str, int], ...] = (
    ("grammar_bounded", 30),
    ("grammar_take_rest", 20),
    ("nested_collections", 20),
    ("primitives", 15),
    ("determinism", 15),
)

_PATTERN_SCHEDULE: tuple[str, ...] = build_weighted_schedule(
    [name for name, _ in _PATTERN_WEIGHTS],
    [weight for _, weight in _PATTERN_WEIGHTS],
)

_state.pattern_intended_weights = {name: float(weight) for name, weight in _PATTERN_WEIGHTS}


class GenerateFuzzError(Exception):
    """Raised when a generation attempt breaks its contract."""


# --- Reporting ---

_REPORT_DIR = pathlib.Path(".fuzz_atheris_corpus") / "generate"


def _build_stats_dict() -> dict[str, Any]:
    stats = build_base_stats_dict(_state)
    stats["values_built"] = _domain.values_built
    stats["exhausted"] = _domain.exhausted
    stats["recursion_limited"] = _domain.recursion_limited
    stats["python_recursion_errors"] = _domain.python_recursion_errors
    if _domain.values_built:
        stats["mean_bytes_consumed"] = round(
            _domain.bytes_consumed_total / _domain.values_built, 2
        )
    return stats


def _emit_report() -> None:
    """Emit comprehensive final report (crash-proof)."""
    emit_final_report(_state, _build_stats_dict(), _REPORT_DIR, "fuzz_generate_report.json")


atexit.register(_emit_report)


# --- Contract Checks ---


def _attempt(data: bytes, target: Any, *, rest: bool) -> tuple[str, Any, int]:
    """One attempt: (outcome, value or error text, final offset)."""
    cursor = Cursor(data)
    ctor = derive(target)
    try:
        value = ctor.take_rest(cursor) if rest else ctor(cursor)
    except IncorrectUsageError as e:
        msg = f"IncorrectUsageError on well-formed target: {e}"
        raise GenerateFuzzError(msg) from e
    except ArbitraryError as e:
        outcome = str(e.category)
        value = str(e)
    else:
        outcome = "ok"
    if not cursor.context.is_clear():
        msg = "Recursion counters not restored after attempt"
        raise GenerateFuzzError(msg)
    if not 0 <= cursor.pos <= len(data):
        msg = f"Cursor offset {cursor.pos} outside 0..={len(data)}"
        raise GenerateFuzzError(msg)
    return outcome, value, cursor.pos


def _count(outcome: str, pos: int) -> None:
    record_outcome(_state, outcome)
    match outcome:
        case "ok":
            _domain.values_built += 1
            _domain.bytes_consumed_total += pos
        case "exhausted":
            _domain.exhausted += 1
        case "recursion":
            _domain.recursion_limited += 1


def _check_primitives(data: bytes) -> None:
    payload = arbitrary_bytes(Cursor(data))
    if not data.startswith(payload):
        msg = "Bounded bytes are not an input prefix"
        raise GenerateFuzzError(msg)
    text = arbitrary_str(Cursor(data))
    if not data.startswith(text.encode("utf-8")):
        msg = "Bounded text is not an input prefix"
        raise GenerateFuzzError(msg)
    rest_text = arbitrary_str.take_rest(Cursor(data))
    if not data.startswith(rest_text.encode("utf-8")):
        msg = "Consume-remaining text is not an input prefix"
        raise GenerateFuzzError(msg)
    arbitrary_float(32)(Cursor(data))
    _count("ok", len(payload))


# --- Main Entry Point ---


def test_one_input(data: bytes) -> None:
    """Atheris entry point: run one generation attempt and check the contract."""
    if _state.iterations == 0:
        _state.initial_memory_mb = current_rss_mb()

    _state.iterations += 1
    _state.status = "running"

    if _state.iterations % _state.checkpoint_interval == 0:
        _emit_report()

    start_time = time.perf_counter()
    pattern = select_pattern_round_robin(_state, _PATTERN_SCHEDULE)
    _state.pattern_coverage[pattern] = _state.pattern_coverage.get(pattern, 0) + 1
    is_interesting = False

    try:
        match pattern:
            case "grammar_bounded":
                outcome, _, pos = _attempt(data, Expr, rest=False)
                _count(outcome, pos)

            case "grammar_take_rest":
                outcome, _, pos = _attempt(data, Expr, rest=True)
                _count(outcome, pos)

            case "nested_collections":
                outcome, _, pos = _attempt(data, NestedCollections, rest=False)
                _count(outcome, pos)

            case "primitives":
                _check_primitives(data)

            case "determinism":
                first = _attempt(data, Expr, rest=False)
                second = _attempt(data, Expr, rest=False)
                if first != second:
                    msg = f"Non-deterministic outcome: {first!r} != {second!r}"
                    raise GenerateFuzzError(msg)
                _count(first[0], first[2])
                is_interesting = first[0] == "ok"

    except GenerateFuzzError:
        _state.findings += 1
        _state.status = "finding"
        raise

    except ALLOWED_EXCEPTIONS:
        _domain.python_recursion_errors += 1
        record_outcome(_state, "python_recursion")

    except Exception as e:  # pylint: disable=broad-exception-caught
        _state.findings += 1
        _state.status = "finding"

        print("\n" + "=" * 80, file=sys.stderr)
        print("[FINDING] GENERATION CONTRACT BREACH", file=sys.stderr)
        print("=" * 80, file=sys.stderr)
        print(f"Pattern:        {pattern}", file=sys.stderr)
        print(f"Exception Type: {type(e).__module__}.{type(e).__name__}", file=sys.stderr)
        print(f"Error Message:  {e}", file=sys.stderr)
        print(f"Input Preview:  {data[:64]!r}", file=sys.stderr)
        print("-" * 80, file=sys.stderr)

        msg = f"{type(e).__name__}: {e}"
        raise GenerateFuzzError(msg) from e

    finally:
        record_iteration_metrics(
            _state, pattern, start_time, data, is_interesting=is_interesting,
        )

        if _state.iterations % GC_INTERVAL == 0:
            gc.collect()

        if _state.iterations % 100 == 0:
            record_memory(_state)


def main() -> None:
    """Run the generation contract fuzzer with CLI support."""
    parser = argparse.ArgumentParser(
        description="arbitraryext generation contract fuzzer using Atheris/libFuzzer",
        epilog="All unrecognized arguments are passed to libFuzzer.",
    )
    parser.add_argument(
        "--checkpoint-interval",
        type=int,
        default=500,
        help="Emit report every N iterations (default: 500)",
    )
    parser.add_argument(
        "--seed-corpus-size",
        type=int,
        default=1000,
        help="Maximum size of in-memory seed corpus (default: 1000)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Level for arbitraryext log output (default: WARNING)",
    )

    args, remaining = parser.parse_known_args()
    _state.checkpoint_interval = args.checkpoint_interval
    _state.seed_corpus_max_size = args.seed_corpus_size
    logging.basicConfig(level=args.log_level, stream=sys.stderr)

    # Deep recursive grammars need bounded inputs to stay under Python's stack limit.
    if not any(arg.startswith("-max_len") for arg in remaining):
        remaining.append("-max_len=4096")

    sys.argv = [sys.argv[0], *remaining]

    print()
    print("=" * 80)
    print("Generation Contract Fuzzer (Atheris)")
    print("=" * 80)
    print("Target:     derive(), Constructor bounded / take_rest, primitives")
    print(f"Checkpoint: Every {_state.checkpoint_interval} iterations")
    print(f"Corpus Max: {_state.seed_corpus_max_size} entries")
    print(f"GC Cycle:   Every {GC_INTERVAL} iterations")
    print(f"Routing:    Round-robin weighted schedule (length: {len(_PATTERN_SCHEDULE)})")
    print("Stopping:   Press Ctrl+C (findings auto-saved)")
    print("=" * 80)
    print()

    atheris.Setup(sys.argv, test_one_input)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
