"""Built-in source plugins for sparqlstep.

Sources load data into the pipeline. Exactly one source per run.
"""

from sparqlstep.plugins.sources.sparql_source import SparqlSource, SparqlSourceConfig

__all__ = ["SparqlSource", "SparqlSourceConfig"]
