# src/sparqlstep/plugins/context.py
"""Run context a host engine hands to source plugins.

Besides the run identity it carries the host's variable space. When the
host supplies ``variables``, placeholders in a plugin's endpoint URL and
query resolve against them instead of the process environment.
"""

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass
class PluginContext:
    """Per-run context passed to every source operation.

    Example:
        ctx = PluginContext(run_id="run-42", variables={"REPO": "SYSTEM"})
        for row in source.load(ctx):
            ...
    """

    run_id: str
    variables: Mapping[str, str] | None = None
    step_name: str | None = None
