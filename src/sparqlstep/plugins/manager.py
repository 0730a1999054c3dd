# src/sparqlstep/plugins/manager.py
"""Source plugin registry backed by pluggy.

Usage:
    manager = PluginManager()
    manager.register_builtin_plugins()
    source = manager.create_source("sparql", {"repositoryURL": url, "sparql": query})
"""

import hashlib
import json
from dataclasses import dataclass
from typing import Any

import pluggy

from sparqlstep.contracts import Determinism, NodeType
from sparqlstep.plugins.hookspecs import PROJECT_NAME, SparqlStepSourceSpec
from sparqlstep.plugins.protocols import SourceProtocol


def _schema_fingerprint(schema_cls: Any) -> str | None:
    """SHA-256 over a schema's declared field names and annotations.

    Dynamic schemas (no declared fields) still hash, to the digest of "{}".
    """
    model_fields = getattr(schema_cls, "model_fields", None)
    if model_fields is None:
        return None
    declared = {name: str(info.annotation) for name, info in model_fields.items()}
    canonical = json.dumps(declared, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class PluginSpec:
    """What a host records about a registered source."""

    name: str
    node_type: NodeType
    version: str
    determinism: Determinism
    output_schema_hash: str | None = None

    @classmethod
    def from_plugin(cls, plugin_cls: type, node_type: NodeType) -> "PluginSpec":
        """Read the registration metadata off a plugin class.

        Raises:
            ValueError: If the class lacks ``name`` or ``plugin_version``
        """
        missing = [attr for attr in ("name", "plugin_version") if not hasattr(plugin_cls, attr)]
        if missing:
            raise ValueError(
                f"Plugin {plugin_cls.__name__} must define {', '.join(repr(m) for m in missing)}"
            )
        return cls(
            name=plugin_cls.name,  # type: ignore[attr-defined]
            node_type=node_type,
            version=plugin_cls.plugin_version,  # type: ignore[attr-defined]
            determinism=getattr(plugin_cls, "determinism", Determinism.IO_READ),
            output_schema_hash=_schema_fingerprint(getattr(plugin_cls, "output_schema", None)),
        )


class PluginManager:
    """Discovers source plugins through the ``sparqlstep_get_source`` hook."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(SparqlStepSourceSpec)
        self._sources: dict[str, type[SourceProtocol]] = {}

    def register_builtin_plugins(self) -> None:
        """Register the sources shipped with this package."""
        from sparqlstep.plugins.sources.hookimpl import builtin_sources

        self.register(builtin_sources)

    def register(self, plugin: Any) -> None:
        """Register a hook implementer and re-index all sources.

        Raises:
            ValueError: If two sources share a name; the implementer is
                unregistered again
        """
        self._pm.register(plugin)
        try:
            self._sources = self._collect_sources()
        except ValueError:
            self._pm.unregister(plugin)
            raise

    def _collect_sources(self) -> dict[str, type[SourceProtocol]]:
        collected: dict[str, type[SourceProtocol]] = {}
        for batch in self._pm.hook.sparqlstep_get_source():
            for source_cls in batch:
                existing = collected.get(source_cls.name)
                if existing is not None:
                    raise ValueError(
                        f"Duplicate source plugin name: '{source_cls.name}' "
                        f"({existing.__name__} and {source_cls.__name__})"
                    )
                collected[source_cls.name] = source_cls
        return collected

    def get_sources(self) -> list[type[SourceProtocol]]:
        return list(self._sources.values())

    def get_source_by_name(self, name: str) -> type[SourceProtocol] | None:
        return self._sources.get(name)

    def get_source_specs(self) -> list[PluginSpec]:
        return [PluginSpec.from_plugin(cls, NodeType.SOURCE) for cls in self._sources.values()]

    def create_source(self, name: str, config: dict[str, Any], **kwargs: Any) -> SourceProtocol:
        """Instantiate a registered source.

        Extra keyword arguments go to the plugin constructor (for example
        ``transport=`` for the SPARQL source).

        Raises:
            KeyError: If no source has that name
            PluginConfigError: If the plugin rejects the config
        """
        source_cls = self._sources.get(name)
        if source_cls is None:
            known = ", ".join(sorted(self._sources)) or "none"
            raise KeyError(f"Unknown source plugin {name!r} (registered: {known})")
        return source_cls(config, **kwargs)  # type: ignore[call-arg]
