"""arbitraryext - structured values from unstructured fuzzer bytes.

Decodes a raw byte buffer into typed, structured Python values
deterministically: the same bytes always build the same value. Intended for
coverage-guided fuzzing, where the fuzzer mutates bytes and the harness
needs well-formed inputs.

Public API:
    Cursor - Forward-only reader over one attempt's input
    Constructor - Value constructor with bounded / consume-remaining modes
    derive - Constructor for a type annotation (dataclasses included)
    generate - Run one generation attempt over a byte buffer
    generate_take_rest - generate() in consume-remaining mode
    arbitrary - Class decorator adding arbitrary() / from_bytes()
    register - Teach derive() a constructor for a type
    GenerationMode - BOUNDED or CONSUME_REMAINING

Exceptions:
    ArbitraryError - Base exception class
    InputExhaustedError - A decision needed entropy the input lacks
    RecursionLimitExceededError - A recursive type ran out of input
    IncorrectUsageError - Caller misuse (bad range, unsupported type)

Submodules:
    arbitraryext.builders - Option, collection, record and variant builders
    arbitraryext.primitives - Integers, booleans, floats, bytes, text
    arbitraryext.sampling - Length sampling and unbiased variant selection
    arbitraryext.containers - Ordered containers (sorted set/dict, heap, linked list)
    arbitraryext.strategy - Per-field strategies for derived dataclasses
    arbitraryext.diagnostics - Error types, codes and formatting
"""

# Essential Public API - Minimal exports for clean namespace
from .constructor import Constructor
from .core import Cursor
from .derive import arbitrary, derive, generate, generate_take_rest, register
from .diagnostics import (
    ArbitraryError,
    IncorrectUsageError,
    InputExhaustedError,
    RecursionLimitExceededError,
)
from .enums import GenerationMode
from .strategy import Custom, Default, Derived, Fixed, arbitrary_field

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
try:
    from importlib.metadata import PackageNotFoundError
    from importlib.metadata import version as _get_version
except ImportError as e:
    # This should never happen on Python 3.13+ (importlib.metadata is stdlib since 3.8)
    raise RuntimeError("importlib.metadata unavailable - Python version too old? " + str(e)) from e

try:
    __version__ = _get_version("arbitraryext")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "ArbitraryError",
    "Constructor",
    "Cursor",
    "Custom",
    "Default",
    "Derived",
    "Fixed",
    "GenerationMode",
    "IncorrectUsageError",
    "InputExhaustedError",
    "RecursionLimitExceededError",
    "__version__",
    "arbitrary",
    "arbitrary_field",
    "derive",
    "generate",
    "generate_take_rest",
    "register",
]
