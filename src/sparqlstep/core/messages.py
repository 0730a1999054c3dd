"""Message catalog for user-facing text.

The core only emits message keys (see CheckResult, ProbeResult). Rendering
layers load a MessageBundle once and pass it to whatever formats output.
"""

from importlib import resources
from typing import Any

import yaml

DEFAULT_LOCALE = "en_US"


class MessageBundle:
    """Key to template mapping loaded from a YAML catalog.

    Example:
        bundle = MessageBundle.load()
        bundle.get("SparqlStep.Connected.OK", endpoint=url)
    """

    def __init__(self, messages: dict[str, str], locale: str = DEFAULT_LOCALE) -> None:
        self._messages = messages
        self.locale = locale

    @classmethod
    def load(cls, locale: str = DEFAULT_LOCALE) -> "MessageBundle":
        """Load the packaged catalog for locale, falling back to en_US."""
        package = resources.files("sparqlstep") / "resources"
        catalog = package / f"messages_{locale}.yaml"
        if not catalog.is_file():
            locale = DEFAULT_LOCALE
            catalog = package / f"messages_{DEFAULT_LOCALE}.yaml"
        raw = yaml.safe_load(catalog.read_text(encoding="utf-8")) or {}
        return cls({str(k): str(v) for k, v in raw.items()}, locale=locale)

    def get(self, key: str, **params: Any) -> str:
        """Render a message; unknown keys render as the key itself."""
        template = self._messages.get(key)
        if template is None:
            return key
        try:
            return template.format(**params)
        except (KeyError, IndexError):
            # Caller omitted a parameter: show the raw template
            return template
