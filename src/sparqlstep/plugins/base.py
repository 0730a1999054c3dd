# src/sparqlstep/plugins/base.py
"""Base class for source plugins.

Subclasses supply load() and close(); run hooks and design-time hooks
default to doing nothing.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from typing import Any

from sparqlstep.contracts import CheckResult, Determinism, FieldMeta, PluginSchema
from sparqlstep.plugins.context import PluginContext


class BaseSource(ABC):
    """Source plugin skeleton.

    Example:
        class FixedRows(BaseSource):
            name = "fixed"
            output_schema = FixedSchema

            def load(self, ctx: PluginContext) -> Iterator[dict[str, Any]]:
                yield from self.config["rows"]

            def close(self) -> None:
                pass
    """

    name: str
    output_schema: type[PluginSchema]
    node_id: str | None = None  # Assigned by the host

    determinism: Determinism = Determinism.IO_READ
    plugin_version: str = "0.0.0"

    def __init__(self, config: dict[str, Any]) -> None:
        self.config = config

    @abstractmethod
    def load(self, ctx: PluginContext) -> Iterator[dict[str, Any]]:
        """Yield row dicts shaped like output_schema."""

    @abstractmethod
    def close(self) -> None:
        """Release resources. Must be safe to call more than once."""

    def on_start(self, ctx: PluginContext) -> None:  # noqa: B027
        """Called before load()."""

    def on_complete(self, ctx: PluginContext) -> None:  # noqa: B027
        """Called after load() is exhausted, before close()."""

    def check(self, input_steps: Sequence[str]) -> list[CheckResult]:
        """Design-time remarks about the step's place in a pipeline."""
        return []

    def get_fields(self) -> list[FieldMeta]:
        """Design-time description of the fields load() will yield."""
        return []
