"""Design-time output schema for downstream steps.

Runs the configured query once to learn its columns and describes each
as a string field trimmed on both sides. Failures here must not break
design-time tooling, so they are logged and produce no fields.
"""

from collections.abc import Mapping

import httpx
import structlog

from sparqlstep.contracts import FieldMeta, FieldType, QueryError, StoreConnectionError, TrimType
from sparqlstep.core.config import StepSettings
from sparqlstep.core.variables import resolve_settings
from sparqlstep.engine.projector import QueryRowProjector
from sparqlstep.store.connection import StoreConnection

logger = structlog.get_logger()


def infer_output_fields(
    settings: StepSettings,
    origin: str | None = None,
    transport: httpx.BaseTransport | None = None,
    environ: Mapping[str, str] | None = None,
) -> list[FieldMeta]:
    """Describe the fields this step will emit for the given settings.

    Args:
        settings: Step settings; placeholders are resolved first
        origin: Name of the step, recorded on each field
        transport: Optional httpx transport for the connection
        environ: Variable space base (defaults to os.environ)

    Returns:
        One FieldMeta per result column, in column order; [] on failure
    """
    resolved = resolve_settings(settings, environ)
    connection = StoreConnection(timeout=resolved.timeout_seconds, transport=transport)
    try:
        connection.open(resolved.repository_url)
        columns = QueryRowProjector().discover_columns(connection, resolved.sparql)
    except (StoreConnectionError, QueryError) as e:
        logger.error(
            "Unable to get step fields",
            endpoint=resolved.repository_url,
            error=str(e),
        )
        return []
    finally:
        connection.close()

    return [
        FieldMeta(
            name=column.strip(),
            type=FieldType.STRING,
            trim_type=TrimType.BOTH,
            origin=origin,
        )
        for column in columns
    ]
