"""Tests for plugin configuration base class."""

import pytest
from pydantic import ValidationError


class TestPluginConfig:
    def test_from_dict_validates(self) -> None:
        from sparqlstep.plugins.config_base import PluginConfig

        class EndpointConfig(PluginConfig):
            url: str
            retries: int = 0

        cfg = EndpointConfig.from_dict({"url": "http://example.org/sparql"})

        assert cfg.url == "http://example.org/sparql"
        assert cfg.retries == 0

    def test_unknown_field_rejected(self) -> None:
        from sparqlstep.plugins.config_base import PluginConfig, PluginConfigError

        class EndpointConfig(PluginConfig):
            url: str

        with pytest.raises(PluginConfigError, match="EndpointConfig") as exc_info:
            EndpointConfig.from_dict({"url": "http://example.org/sparql", "extra": 1})

        assert exc_info.value.config_name == "EndpointConfig"
        assert len(exc_info.value.problems) == 1
        assert exc_info.value.problems[0].startswith("extra:")

    def test_every_problem_reported(self) -> None:
        from sparqlstep.plugins.config_base import PluginConfig, PluginConfigError

        class EndpointConfig(PluginConfig):
            url: str
            retries: int = 0

        with pytest.raises(PluginConfigError) as exc_info:
            EndpointConfig.from_dict({"retries": "many"})

        locations = sorted(problem.split(":")[0] for problem in exc_info.value.problems)
        assert locations == ["retries", "url"]

    def test_config_is_frozen(self) -> None:
        from sparqlstep.plugins.config_base import PluginConfig

        class EndpointConfig(PluginConfig):
            url: str

        cfg = EndpointConfig.from_dict({"url": "http://example.org/sparql"})

        with pytest.raises(ValidationError):
            cfg.url = "http://other.example.org"  # type: ignore[misc]
