# src/sparqlstep/plugins/sources/sparql_source.py
"""SPARQL source plugin.

Runs one tuple query against a remote triple-store and yields a row per
result binding. Every value is a string (or None for an unbound
variable); the store's literal typing is not carried over.
"""

import logging
from collections.abc import Iterator, Sequence
from typing import Any

import httpx
from pydantic import AliasChoices, Field

from sparqlstep.contracts import (
    CheckResult,
    Determinism,
    FieldMeta,
    PluginSchema,
    StepState,
)
from sparqlstep.core.config import StepSettings
from sparqlstep.engine.check import check_input_steps
from sparqlstep.engine.runtime import StepRuntime
from sparqlstep.engine.schema import infer_output_fields
from sparqlstep.plugins.base import BaseSource
from sparqlstep.plugins.config_base import PluginConfig
from sparqlstep.plugins.context import PluginContext

logger = logging.getLogger(__name__)


class SparqlOutputSchema(PluginSchema):
    """Dynamic schema - columns are determined by the query at runtime."""

    model_config = {"extra": "allow"}  # noqa: RUF012 - Pydantic pattern


class SparqlSourceConfig(PluginConfig):
    """Configuration for SPARQL source plugin."""

    repository_url: str = Field(
        validation_alias=AliasChoices("repositoryURL", "repository_url"),
    )
    sparql: str
    variables: dict[str, str] = Field(default_factory=dict)
    timeout_seconds: float | None = Field(default=None, gt=0)
    step_name: str | None = None

    def to_settings(self) -> StepSettings:
        return StepSettings(
            repository_url=self.repository_url,
            sparql=self.sparql,
            variables=self.variables,
            timeout_seconds=self.timeout_seconds,
        )


class SparqlSource(BaseSource):
    """Load rows from a SPARQL tuple query.

    Config options:
        repositoryURL: Endpoint URL (required; repository_url also accepted)
        sparql: Query text (required)
        variables: Values for ${NAME} / %%NAME%% placeholders (default: {})
        timeout_seconds: Transport timeout (default: None, unbounded)
        step_name: Name recorded on log events and field origins

    Placeholders resolve against the context's variables when the host
    passes them, else the process environment; ``variables`` from the
    config win either way.
    """

    name = "sparql"
    output_schema = SparqlOutputSchema
    determinism = Determinism.EXTERNAL_CALL
    plugin_version = "1.0.0"

    def __init__(
        self,
        config: dict[str, Any],
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__(config)
        cfg = SparqlSourceConfig.from_dict(config)
        self._settings = cfg.to_settings()
        self._step_name = cfg.step_name
        self._transport = transport
        self._runtime: StepRuntime | None = None

    @property
    def settings(self) -> StepSettings:
        return self._settings

    @property
    def step_name(self) -> str:
        return self._step_name or self.name

    @property
    def rows_loaded(self) -> int:
        return self._runtime.rows_written if self._runtime is not None else 0

    def on_start(self, ctx: PluginContext) -> None:
        """Open the store connection. Does nothing if already open.

        Raises:
            StoreConnectionError: If the endpoint cannot be reached
        """
        if self._runtime is not None and self._runtime.state is StepState.RUNNING:
            return
        if self._runtime is None:
            if self._step_name is None and ctx.step_name:
                self._step_name = ctx.step_name
            logger.debug("Starting SPARQL source %s for run %s", self.step_name, ctx.run_id)
            self._runtime = StepRuntime(
                self._settings,
                step_name=self.step_name,
                transport=self._transport,
                environ=ctx.variables,
            )
        if not self._runtime.init():
            error = self._runtime.init_error
            assert error is not None  # init() records why it failed
            raise error

    def load(self, ctx: PluginContext) -> Iterator[dict[str, Any]]:
        """Execute the query and yield one dict per result binding.

        Yields:
            Dict for each binding with result columns as keys, in column order.

        Raises:
            StoreConnectionError: If on_start() was skipped and the endpoint
                cannot be reached
            QueryError: If the store rejects or fails the query
        """
        self.on_start(ctx)
        assert self._runtime is not None  # on_start() created it
        for row in self._runtime.rows():
            yield row.to_row()

    def close(self) -> None:
        """Release the store connection. Idempotent."""
        if self._runtime is None:
            return
        self._runtime.dispose()
        logger.debug("SPARQL source %s closed after %d rows", self.step_name, self.rows_loaded)

    def check(self, input_steps: Sequence[str]) -> list[CheckResult]:
        """Design-time check: this source must not receive rows."""
        return check_input_steps(input_steps, step_name=self.step_name)

    def get_fields(self) -> list[FieldMeta]:
        """Design-time output fields, discovered by running the query."""
        return infer_output_fields(
            self._settings,
            origin=self.step_name,
            transport=self._transport,
        )
