# src/sparqlstep/plugins/hookspecs.py
"""pluggy hooks through which packages contribute source plugins.

A package offering sources registers an object with one hookimpl:

    class MySources:
        @hookimpl
        def sparqlstep_get_source(self):
            return [MySource]
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from sparqlstep.plugins.protocols import SourceProtocol

PROJECT_NAME = "sparqlstep"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class SparqlStepSourceSpec:
    """Hook specifications for source plugins."""

    @hookspec
    def sparqlstep_get_source(self) -> list[type["SourceProtocol"]]:  # type: ignore[empty-body]
        """Source plugin classes (not instances) offered by the implementer."""
