"""sparqlstep: SPARQL tuple-query source step for row pipelines."""

__version__ = "0.1.0"
