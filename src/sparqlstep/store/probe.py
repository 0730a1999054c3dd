"""Connection test: open an endpoint, run a fixed probe query, report.

Backs the CLI ``test-connection`` command. Store failures are reported
in the ProbeResult, never raised.
"""

import httpx
import structlog

from sparqlstep.contracts import ProbeResult, QueryError, StoreConnectionError
from sparqlstep.store.connection import StoreConnection

logger = structlog.get_logger()

PROBE_QUERY = "SELECT * WHERE { ?s ?p ?o } LIMIT 1"


def probe_connection(
    endpoint_url: str,
    timeout: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> ProbeResult:
    """Check that endpoint_url accepts connections and answers a query."""
    connection = StoreConnection(timeout=timeout, transport=transport)
    try:
        connection.open(endpoint_url)
        connection.execute(PROBE_QUERY)
    except (StoreConnectionError, QueryError) as e:
        logger.error("Connection test failed", endpoint=endpoint_url, error=str(e))
        return ProbeResult(
            ok=False,
            endpoint_url=endpoint_url,
            message_key="SparqlStep.Connected.Error",
            error=str(e),
        )
    finally:
        connection.close()

    return ProbeResult(ok=True, endpoint_url=endpoint_url, message_key="SparqlStep.Connected.OK")


