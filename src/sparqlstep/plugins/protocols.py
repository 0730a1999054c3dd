# src/sparqlstep/plugins/protocols.py
"""Structural contract a host engine relies on when driving a source.

Checked with isinstance() at registration boundaries; BaseSource is the
convenient way to satisfy it.
"""

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from sparqlstep.contracts import CheckResult, FieldMeta, PluginSchema
    from sparqlstep.plugins.context import PluginContext


@runtime_checkable
class SourceProtocol(Protocol):
    """A pipeline step that produces rows and consumes none.

    Run order, driven by the host:
        on_start(ctx) -> load(ctx) -> on_complete(ctx) -> close()

    close() runs on every exit path, including after a failed on_start().
    check() and get_fields() serve pipeline editors and may be called
    without a run.
    """

    name: str
    output_schema: type["PluginSchema"]

    def __init__(self, config: dict[str, Any]) -> None: ...

    def on_start(self, ctx: "PluginContext") -> None: ...

    def load(self, ctx: "PluginContext") -> Iterator[dict[str, Any]]: ...

    def on_complete(self, ctx: "PluginContext") -> None: ...

    def close(self) -> None: ...

    def check(self, input_steps: Sequence[str]) -> list["CheckResult"]: ...

    def get_fields(self) -> list["FieldMeta"]: ...
