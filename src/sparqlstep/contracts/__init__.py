"""Shared contracts for cross-boundary data types.

All dataclasses, enums and errors that cross subsystem boundaries
are defined here.

Import pattern:
    from sparqlstep.contracts import OutputRow, QueryError, StepState
"""

from sparqlstep.contracts.enums import (
    CheckResultType,
    ConnectionState,
    Determinism,
    FieldType,
    NodeType,
    StepState,
    TrimType,
)
from sparqlstep.contracts.errors import (
    QueryError,
    SparqlStepError,
    StepLifecycleError,
    StoreConnectionError,
    StoreStateError,
)
from sparqlstep.contracts.results import (
    CheckResult,
    FieldMeta,
    OutputRow,
    ProbeResult,
)
from sparqlstep.contracts.data import PluginSchema

__all__ = [
    # enums
    "CheckResultType",
    "ConnectionState",
    "Determinism",
    "FieldType",
    "NodeType",
    "StepState",
    "TrimType",
    # errors
    "QueryError",
    "SparqlStepError",
    "StepLifecycleError",
    "StoreConnectionError",
    "StoreStateError",
    # results
    "CheckResult",
    "FieldMeta",
    "OutputRow",
    "ProbeResult",
    # data
    "PluginSchema",
]
