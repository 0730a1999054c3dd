"""Source plugin layer for host pipeline engines.

Hosts discover sources through PluginManager (pluggy hook
``sparqlstep_get_source``), construct them from a plain config dict, and
drive them with a PluginContext.
"""

from sparqlstep.plugins.base import BaseSource
from sparqlstep.plugins.config_base import PluginConfig, PluginConfigError
from sparqlstep.plugins.context import PluginContext
from sparqlstep.plugins.hookspecs import hookimpl, hookspec
from sparqlstep.plugins.manager import PluginManager, PluginSpec
from sparqlstep.plugins.protocols import SourceProtocol

__all__ = [
    "BaseSource",
    "PluginConfig",
    "PluginConfigError",
    "PluginContext",
    "PluginManager",
    "PluginSpec",
    "SourceProtocol",
    "hookimpl",
    "hookspec",
]
