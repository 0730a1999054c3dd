# src/sparqlstep/plugins/config_base.py
"""Typed plugin configuration.

Hosts hand plugins a plain dict; PluginConfig subclasses turn it into a
frozen, validated model and report every problem at once:

    cfg = SparqlSourceConfig.from_dict({"repositoryURL": url, "sparql": query})
"""

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, ValidationError


class PluginConfigError(Exception):
    """Plugin configuration failed validation.

    ``problems`` holds one ``"location: message"`` line per validation error.
    """

    def __init__(self, config_name: str, problems: list[str]) -> None:
        self.config_name = config_name
        self.problems = problems
        super().__init__(f"Invalid configuration for {config_name}: " + "; ".join(problems))


class PluginConfig(BaseModel):
    """Base for plugin configuration models. Unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Validate a host-supplied dict.

        Raises:
            PluginConfigError: Listing every invalid or unknown key
        """
        try:
            return cls.model_validate(config)
        except ValidationError as e:
            problems = [
                f"{'.'.join(str(part) for part in error['loc']) or '<root>'}: {error['msg']}"
                for error in e.errors()
            ]
            raise PluginConfigError(cls.__name__, problems) from e
