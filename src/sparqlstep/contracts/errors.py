"""Error types raised across the store, engine and plugin layers.

Errors carry structured fields (endpoint, status, detail) so callers can
render them however they like. None of them hold localized text.
"""


class SparqlStepError(Exception):
    """Base class for all sparqlstep errors."""

    pass


class StoreConnectionError(SparqlStepError):
    """The triple-store could not be reached or initialized.

    Fatal to the current run; never retried.
    """

    def __init__(
        self,
        endpoint_url: str,
        detail: str,
        status_code: int | None = None,
    ) -> None:
        self.endpoint_url = endpoint_url
        self.detail = detail
        self.status_code = status_code
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"Cannot connect to {endpoint_url!r}{status}: {detail}")


class QueryError(SparqlStepError):
    """Query text was rejected by the store, or its evaluation failed.

    Fatal to the current run. A failure mid-stream aborts the remaining rows.
    """

    def __init__(
        self,
        detail: str,
        status_code: int | None = None,
        query: str | None = None,
    ) -> None:
        self.detail = detail
        self.status_code = status_code
        self.query = query
        status = f" (HTTP {status_code})" if status_code is not None else ""
        super().__init__(f"Query failed{status}: {detail}")


class StoreStateError(SparqlStepError):
    """A StoreConnection operation was called in the wrong state."""

    pass


class StepLifecycleError(SparqlStepError):
    """A StepRuntime operation was called out of lifecycle order."""

    pass
