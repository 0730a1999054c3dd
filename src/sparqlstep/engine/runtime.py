# src/sparqlstep/engine/runtime.py
"""Step runtime: the init / produce / dispose contract a host engine drives.

Lifecycle is an explicit state machine:

    IDLE --init() ok--> RUNNING --dispose()--> CLOSED
    IDLE --init() failed--> IDLE --dispose()--> CLOSED

The host calls init() at step start and dispose() at step end on every
exit path (success, failure, or abort). Using the runtime as a context
manager guarantees the dispose() half.
"""

from collections.abc import Callable, Iterator, Mapping
from types import TracebackType

import httpx
import structlog

from sparqlstep.contracts import (
    OutputRow,
    QueryError,
    StepLifecycleError,
    StepState,
    StoreConnectionError,
)
from sparqlstep.core.config import StepSettings
from sparqlstep.core.variables import resolve_settings
from sparqlstep.engine.projector import QueryRowProjector
from sparqlstep.store.connection import StoreConnection

logger = structlog.get_logger()

RowEmitter = Callable[[OutputRow], None]


class StepRuntime:
    """Runs one configured query and hands its rows to the host.

    This step is a source: all of its output is produced by a single
    produce_rows() (or rows()) call per run.

    Example:
        with StepRuntime(settings) as runtime:
            if runtime.init():
                runtime.produce_rows(downstream.put_row)
    """

    def __init__(
        self,
        settings: StepSettings,
        step_name: str | None = None,
        transport: httpx.BaseTransport | None = None,
        environ: Mapping[str, str] | None = None,
        projector: QueryRowProjector | None = None,
    ) -> None:
        self._settings = settings
        self.step_name = step_name
        self._transport = transport
        self._environ = environ
        self._projector = projector or QueryRowProjector()

        self._state = StepState.IDLE
        self._connection: StoreConnection | None = None
        self._resolved: StepSettings | None = None
        self._rows_started = False
        self._rows_written = 0
        self._columns: tuple[str, ...] | None = None
        self._init_error: StoreConnectionError | None = None

    @property
    def state(self) -> StepState:
        return self._state

    @property
    def rows_written(self) -> int:
        """Rows handed out so far in this run."""
        return self._rows_written

    @property
    def columns(self) -> tuple[str, ...] | None:
        """Output columns of this run, once the query has been executed."""
        return self._columns

    @property
    def init_error(self) -> StoreConnectionError | None:
        """Why the last init() returned False, if it did."""
        return self._init_error

    @property
    def resolved_settings(self) -> StepSettings | None:
        """Settings with placeholders resolved, once init() has succeeded."""
        return self._resolved

    def init(self) -> bool:
        """Resolve placeholders and open the store connection.

        Returns:
            True when the connection is open, False if it could not be
            established (the error is logged and kept in init_error)

        Raises:
            StepLifecycleError: If called other than from IDLE
        """
        if self._state is not StepState.IDLE:
            raise StepLifecycleError(f"init() called in state {self._state.value}")

        resolved = resolve_settings(self._settings, self._environ)
        connection = StoreConnection(
            timeout=resolved.timeout_seconds,
            transport=self._transport,
        )
        try:
            connection.open(resolved.repository_url)
        except StoreConnectionError as e:
            connection.close()
            self._init_error = e
            logger.error(
                "Unable to initialise step",
                step=self.step_name,
                endpoint=resolved.repository_url,
                error=str(e),
            )
            return False

        self._init_error = None
        self._connection = connection
        self._resolved = resolved
        self._state = StepState.RUNNING
        return True

    def rows(self) -> Iterator[OutputRow]:
        """Pull-based row sequence for this run.

        Raises:
            StepLifecycleError: If the step is not RUNNING, or rows were
                already produced in this run
        """
        if self._state is not StepState.RUNNING:
            raise StepLifecycleError(f"rows() called in state {self._state.value}")
        if self._rows_started:
            raise StepLifecycleError("Rows were already produced for this run")
        self._rows_started = True
        return self._iter_rows()

    def _iter_rows(self) -> Iterator[OutputRow]:
        # Both set together by a successful init()
        assert self._connection is not None
        assert self._resolved is not None
        for row in self._projector.project(
            self._connection, self._resolved.sparql, on_columns=self._set_columns
        ):
            self._rows_written += 1
            yield row

    def _set_columns(self, columns: tuple[str, ...]) -> None:
        self._columns = columns

    def produce_rows(self, emit: RowEmitter) -> bool:
        """Execute the query once and push every row to emit.

        Returns:
            False, always: the step has finished producing and must not
            be called again

        Raises:
            QueryError: The run is aborted; rows already emitted stay emitted
            StepLifecycleError: See rows()
        """
        try:
            for row in self.rows():
                emit(row)
        except QueryError as e:
            logger.error(
                "Step run failed",
                step=self.step_name,
                rows=self._rows_written,
                error=str(e),
            )
            raise

        logger.info("Step output done", step=self.step_name, rows=self._rows_written)
        return False

    def dispose(self) -> None:
        """Close the connection and end the lifecycle.

        Valid from any state; only the first call does anything. Never raises.
        """
        if self._state is StepState.CLOSED:
            return
        connection, self._connection = self._connection, None
        if connection is not None:
            connection.close()
        self._state = StepState.CLOSED

    def __enter__(self) -> "StepRuntime":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()
