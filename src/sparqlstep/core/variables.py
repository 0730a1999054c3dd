"""Placeholder substitution for endpoint URLs and query text.

Supports the two placeholder forms pipeline hosts commonly use:
    ${NAME}    and    %%NAME%%
Unknown names are left exactly as written so the store reports them.
"""

import os
import re
from collections.abc import Mapping

from sparqlstep.core.config import StepSettings

_PLACEHOLDER = re.compile(r"\$\{([^}\s]+)\}|%%([^%\s]+)%%")


def substitute_variables(text: str, variables: Mapping[str, str]) -> str:
    """Replace every known placeholder in text with its value.

    Substitution is single-pass: values are not themselves expanded.
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1) or match.group(2)
        if name in variables:
            return variables[name]
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, text)


def build_variable_space(
    settings: StepSettings,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Process environment overlaid by the step's own variables."""
    space = dict(os.environ if environ is None else environ)
    space.update(settings.variables)
    return space


def resolve_settings(
    settings: StepSettings,
    environ: Mapping[str, str] | None = None,
) -> StepSettings:
    """Return a copy of settings with placeholders in both strings resolved."""
    space = build_variable_space(settings, environ)
    return settings.model_copy(
        update={
            "repository_url": substitute_variables(settings.repository_url, space),
            "sparql": substitute_variables(settings.sparql, space),
        }
    )
