"""All status codes, states, and kinds used across subsystem boundaries.

Every plugin MUST declare a Determinism value at registration.
"""

from enum import Enum


class ConnectionState(str, Enum):
    """State of a StoreConnection.

    DISCONNECTED is both the initial and the terminal state; a closed
    connection may be opened again.
    """

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class StepState(str, Enum):
    """Lifecycle of a StepRuntime.

    IDLE: constructed, or init() failed
    RUNNING: connection open, rows may be produced
    CLOSED: dispose() has run; terminal
    """

    IDLE = "idle"
    RUNNING = "running"
    CLOSED = "closed"


class CheckResultType(str, Enum):
    """Severity of a design-time verification remark."""

    OK = "ok"
    ERROR = "error"


class FieldType(str, Enum):
    """Value type of an output field.

    Rows carry lexical strings only; typed literals are not preserved.
    """

    STRING = "string"


class TrimType(str, Enum):
    """Whitespace trimming applied to a field by the host engine."""

    BOTH = "both"


class NodeType(str, Enum):
    """Types of plugin nodes this package provides.

    Using str as base allows direct JSON serialization and comparison.
    """

    SOURCE = "source"


class Determinism(str, Enum):
    """Plugin determinism classification for reproducibility.

    IO_READ: Reads local state that may change between runs
    EXTERNAL_CALL: Depends on a remote service whose data may change
    """

    IO_READ = "io_read"
    EXTERNAL_CALL = "external_call"
