"""Registers the sources shipped with sparqlstep."""

from typing import Any

from sparqlstep.plugins.hookspecs import hookimpl


class SparqlStepBuiltinSources:
    @hookimpl
    def sparqlstep_get_source(self) -> list[type[Any]]:
        # Imported late: the source module pulls in the whole engine
        from sparqlstep.plugins.sources.sparql_source import SparqlSource

        return [SparqlSource]


builtin_sources = SparqlStepBuiltinSources()
