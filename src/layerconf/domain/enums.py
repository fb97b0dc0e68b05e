"""Type-safe domain enums for value kinds and output formats."""

from __future__ import annotations

from enum import Enum


class ValueKind(str, Enum):
    """Tag describing how the engine treats a configuration value.

    Merge, resolution and freezing dispatch on this tag instead of probing
    types ad hoc. Inherits from str to allow direct string comparison.

    Attributes:
        SCALAR: Atomic value (None, bool, numbers, strings, opaque objects).
        NODE: Mapping of string keys to values.
        SEQUENCE: Ordered list of values.
        DATE: ``date``, ``datetime`` or ``time`` instance.
        REGEX: Compiled regular expression.
        BINARY: ``bytes`` or ``bytearray`` buffer.
        DEFERRED: Placeholder resolved after the final merge.
        ACCESSOR: Computed entry evaluated on read.
        RAW: Live object passed through untouched (not cloned, merged or frozen).

    Example:
        >>> ValueKind.DEFERRED.value
        'deferred'
        >>> ValueKind.NODE == "node"
        True
    """

    SCALAR = "scalar"
    NODE = "node"
    SEQUENCE = "sequence"
    DATE = "date"
    REGEX = "regex"
    BINARY = "binary"
    DEFERRED = "deferred"
    ACCESSOR = "accessor"
    RAW = "raw"


class OutputFormat(str, Enum):
    """Output format options for configuration display.

    Defines valid output format choices for the config command.
    Inherits from str to allow direct string comparison and Click integration.

    Attributes:
        HUMAN: Human-readable TOML-like output format.
        JSON: Machine-readable JSON output format.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


__all__ = [
    "OutputFormat",
    "ValueKind",
]
