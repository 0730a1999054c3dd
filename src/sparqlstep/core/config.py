# src/sparqlstep/core/config.py
"""
Configuration schema, loading and persistence for the SPARQL step.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) once loaded for a run.

Persisted shape (YAML):
    repositoryURL: http://localhost:8080/openrdf-sesame/repositories/SYSTEM
    sparql: |
      SELECT ?repositoryID
      WHERE { ?repository sys:repositoryID ?repositoryID }
    variables:          # optional, host variable space
      GRAPH: http://example.org/g
    timeout_seconds: 30 # optional, transport timeout
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

DEFAULT_REPOSITORY_URL = "http://localhost:8080/openrdf-sesame/repositories/SYSTEM"

DEFAULT_SPARQL = (
    "PREFIX rdf:<http://www.w3.org/1999/02/22-rdf-syntax-ns#>\n"
    "PREFIX sys:<http://www.openrdf.org/config/repository#>\n"
    "SELECT ?repositoryID\n"
    "WHERE {\n"
    "      ?repository sys:repositoryID ?repositoryID .\n"
    "}\n"
    "ORDER BY ASC(?repositoryID)"
)

ENVVAR_PREFIX = "SPARQLSTEP"


class StepSettings(BaseModel):
    """Endpoint and query for one step run.

    Both strings may contain ${NAME} or %%NAME%% placeholders; they are
    resolved against the variable space just before use, never here.

    Example YAML:
        repositoryURL: http://localhost:8080/openrdf-sesame/repositories/${REPO}
        sparql: "SELECT ?s WHERE { ?s ?p ?o } LIMIT 10"
    """

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    repository_url: str = Field(
        validation_alias=AliasChoices("repositoryURL", "repository_url", "repositoryurl"),
        serialization_alias="repositoryURL",
        description="Triple-store endpoint URL",
    )
    sparql: str = Field(description="Tuple query text, submitted verbatim")
    variables: dict[str, str] = Field(
        default_factory=dict,
        description="Values for ${NAME} / %%NAME%% placeholders",
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Transport timeout; None leaves requests unbounded",
    )


def default_settings() -> StepSettings:
    """Settings a newly created step starts with."""
    return StepSettings(repository_url=DEFAULT_REPOSITORY_URL, sparql=DEFAULT_SPARQL)


def load_settings(config_path: Path) -> StepSettings:
    """Load settings from YAML file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (SPARQLSTEP_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated StepSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Explicit check for file existence (Dynaconf silently accepts missing files)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix=ENVVAR_PREFIX,
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
        # Query text may start with @; keep it verbatim instead of
        # reading @format, @json and friends as Dynaconf tokens
        auto_cast=False,
    )

    # Dynaconf returns uppercase keys; lowercase them for Pydantic and drop
    # its internal settings
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {
        k.lower(): v
        for k, v in dynaconf_settings.as_dict().items()
        if k not in internal_keys
    }
    return StepSettings.model_validate(raw_config)


class _SettingsDumper(yaml.SafeDumper):
    """SafeDumper that writes multi-line strings as literal blocks."""


def _represent_str(dumper: yaml.SafeDumper, value: str) -> yaml.ScalarNode:
    # PyYAML falls back to a quoted style when a literal block cannot
    # represent the value exactly
    style = "|" if "\n" in value else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", value, style=style)


_SettingsDumper.add_representer(str, _represent_str)


def dump_settings(settings: StepSettings) -> str:
    """Serialize settings to YAML using the persisted key names."""
    data: dict[str, Any] = settings.model_dump(by_alias=True, exclude_defaults=True)
    # Required fields always appear, in their persisted order
    ordered = {
        "repositoryURL": settings.repository_url,
        "sparql": settings.sparql,
        **{k: v for k, v in data.items() if k not in ("repositoryURL", "sparql")},
    }
    return yaml.dump(
        ordered,
        Dumper=_SettingsDumper,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def save_settings(settings: StepSettings, config_path: Path) -> None:
    """Write settings to a YAML file readable by load_settings()."""
    config_path.write_text(dump_settings(settings), encoding="utf-8")
