"""Script Values - Indexing, slicing and guarded arithmetic for an embedded script engine."""

from script_values.arithmetic import ArithmeticGuard
from script_values.bitfield import BitFieldAccessor
from script_values.config import EngineConfig, SizeLimits, load_config
from script_values.engine import Engine, Indexable
from script_values.errors import (
    ArithError,
    ArithOverflow,
    ConfigurationError,
    DivideByZero,
    IndexInvalidNoOp,
    InvalidFloatOp,
    InvalidRangeStep,
    ScriptValueError,
    SizeLimitExceeded,
    UnsupportedOperation,
)
from script_values.indexing import (
    CountRange,
    IndexRange,
    ResolvedRange,
    resolve_insert_position,
    resolve_position,
    resolve_range,
    stepped_range,
)
from script_values.parsing import IndexParser, parse_index
from script_values.size_guard import DataSizes, SizeGuard
from script_values.slicing import SliceEngine
from script_values.types import (
    ArrayValue,
    BlobValue,
    IntegerWidth,
    SequenceKind,
    SequenceValue,
    TextValue,
)

__all__ = [
    # Main API
    "Engine",
    "EngineConfig",
    "SizeLimits",
    "load_config",
    "Indexable",
    # Values
    "SequenceValue",
    "SequenceKind",
    "ArrayValue",
    "TextValue",
    "BlobValue",
    "IntegerWidth",
    # Indexing
    "IndexRange",
    "CountRange",
    "ResolvedRange",
    "resolve_position",
    "resolve_insert_position",
    "resolve_range",
    "stepped_range",
    "IndexParser",
    "parse_index",
    # Guards and operations
    "ArithmeticGuard",
    "BitFieldAccessor",
    "SliceEngine",
    "SizeGuard",
    "DataSizes",
    # Errors
    "ScriptValueError",
    "ConfigurationError",
    "IndexInvalidNoOp",
    "SizeLimitExceeded",
    "ArithError",
    "ArithOverflow",
    "DivideByZero",
    "InvalidFloatOp",
    "InvalidRangeStep",
    "UnsupportedOperation",
]

__version__ = "0.1.0"
