# src/sparqlstep/engine/projector.py
"""Projection of tuple query results into pipeline rows.

QueryRowProjector borrows a StoreConnection for one run and never
closes it; the caller owns the connection's lifecycle.

Unbound variables: when a binding leaves a column unbound, the row
carries None for that field. Every bound value is its lexical string.
"""

from collections.abc import Callable, Iterator

import structlog

from sparqlstep.contracts import OutputRow
from sparqlstep.store.connection import StoreConnection

logger = structlog.get_logger()


class QueryRowProjector:
    """Runs a query on a connection and turns each binding into an OutputRow.

    Example:
        projector = QueryRowProjector()
        for row in projector.project(conn, "SELECT ?s WHERE { ?s ?p ?o }"):
            print(row.to_row())
    """

    def discover_columns(self, connection: StoreConnection, query_text: str) -> list[str]:
        """Run the query once to learn its output columns.

        This is a full query execution: the store only reports a result's
        variable names after evaluating it. The result is closed before
        returning; the connection stays open.

        Raises:
            QueryError: If the store rejects or fails to evaluate the query
        """
        result = connection.execute(query_text)
        try:
            columns = result.columns
        finally:
            result.close()
        logger.debug("Discovered columns", columns=columns)
        return columns

    def project(
        self,
        connection: StoreConnection,
        query_text: str,
        on_columns: Callable[[tuple[str, ...]], None] | None = None,
    ) -> Iterator[OutputRow]:
        """Execute the query and lazily yield one OutputRow per binding.

        The query runs when iteration starts. The sequence is single-pass;
        iterate again only by calling project() again. on_columns, if
        given, receives the column list before the first row, even when
        the result is empty.

        Raises:
            QueryError: On rejection or evaluation failure, including
                mid-stream; remaining rows are abandoned
        """
        result = connection.execute(query_text)
        columns = tuple(result.columns)
        count = 0
        try:
            if on_columns is not None:
                on_columns(columns)
            for binding in result:
                yield OutputRow(
                    fields=columns,
                    values=tuple(binding.get(name) for name in columns),
                )
                count += 1
        finally:
            result.close()
            logger.debug("Projection finished", columns=list(columns), rows=count)
