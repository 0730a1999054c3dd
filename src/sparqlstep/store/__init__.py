"""Triple-store access: connection lifecycle and connection probing."""

from sparqlstep.store.connection import Binding, StoreConnection, TupleResult
from sparqlstep.store.probe import PROBE_QUERY, probe_connection

__all__ = [
    "PROBE_QUERY",
    "Binding",
    "StoreConnection",
    "TupleResult",
    "probe_connection",
]
