# tests/engine/test_runtime.py
"""Tests for the StepRuntime lifecycle."""

import pytest

from fakes import ENDPOINT, REPOSITORY_QUERY, FakeTripleStore, literal
from sparqlstep.contracts import (
    OutputRow,
    QueryError,
    StepLifecycleError,
    StepState,
    StoreConnectionError,
)
from sparqlstep.core.config import StepSettings


def _settings(**overrides: object) -> StepSettings:
    values: dict[str, object] = {"repository_url": ENDPOINT, "sparql": REPOSITORY_QUERY}
    values.update(overrides)
    return StepSettings(**values)


class TestInit:
    """init() opens the connection or reports failure."""

    def test_init_success_moves_to_running(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        runtime = StepRuntime(_settings(), transport=repository_store.transport, environ={})
        assert runtime.state is StepState.IDLE

        assert runtime.init() is True

        assert runtime.state is StepState.RUNNING
        assert runtime.init_error is None
        runtime.dispose()

    def test_unreachable_endpoint_returns_false(self, unreachable_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        runtime = StepRuntime(_settings(), transport=unreachable_store.transport, environ={})

        assert runtime.init() is False

        assert runtime.state is StepState.IDLE
        assert isinstance(runtime.init_error, StoreConnectionError)
        assert runtime.init_error.endpoint_url == ENDPOINT

        runtime.dispose()  # Should not raise
        assert runtime.state is StepState.CLOSED

    def test_init_resolves_placeholders(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        settings = _settings(
            repository_url="http://localhost:8080/openrdf-sesame/repositories/${REPO}",
            sparql="SELECT ?s WHERE { GRAPH <%%GRAPH%%> { ?s ?p ?o } }",
            variables={"GRAPH": "http://example.org/g"},
        )
        runtime = StepRuntime(
            settings, transport=repository_store.transport, environ={"REPO": "SYSTEM"}
        )

        assert runtime.init()
        resolved = runtime.resolved_settings
        assert resolved is not None
        assert resolved.repository_url == ENDPOINT
        assert resolved.sparql == "SELECT ?s WHERE { GRAPH <http://example.org/g> { ?s ?p ?o } }"
        assert str(repository_store.requests[0].url) == ENDPOINT
        runtime.dispose()

    def test_init_twice_is_forbidden(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        with StepRuntime(_settings(), transport=repository_store.transport, environ={}) as runtime:
            runtime.init()

            with pytest.raises(StepLifecycleError, match="running"):
                runtime.init()

    def test_init_after_dispose_is_forbidden(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        runtime = StepRuntime(_settings(), transport=repository_store.transport, environ={})
        runtime.dispose()

        with pytest.raises(StepLifecycleError, match="closed"):
            runtime.init()

    def test_failed_init_can_be_retried_by_host(self) -> None:
        """A failed init leaves the step IDLE, so the host may try again."""
        from sparqlstep.engine.runtime import StepRuntime

        store = FakeTripleStore(columns=["repositoryID"], unreachable=True)
        runtime = StepRuntime(_settings(), transport=store.transport, environ={})
        assert runtime.init() is False

        store.unreachable = False

        assert runtime.init() is True
        assert runtime.init_error is None
        runtime.dispose()


class TestProduceRows:
    """produce_rows() emits every row exactly once."""

    def test_repository_rows_in_order(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        emitted: list[OutputRow] = []
        with StepRuntime(_settings(), transport=repository_store.transport, environ={}) as runtime:
            assert runtime.init()

            more = runtime.produce_rows(emitted.append)

        assert more is False
        assert [row.to_row() for row in emitted] == [
            {"repositoryID": "a"},
            {"repositoryID": "b"},
        ]
        assert runtime.rows_written == 2
        assert runtime.state is StepState.CLOSED

    def test_zero_rows_is_success(self, empty_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        emitted: list[OutputRow] = []
        settings = _settings(sparql="SELECT * WHERE { ?s ?p ?o }")
        with StepRuntime(settings, transport=empty_store.transport, environ={}) as runtime:
            assert runtime.init()

            assert runtime.produce_rows(emitted.append) is False

        assert emitted == []
        assert runtime.rows_written == 0

    def test_columns_known_for_empty_result(self, empty_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        with StepRuntime(_settings(), transport=empty_store.transport, environ={}) as runtime:
            assert runtime.init()
            assert runtime.columns is None

            runtime.produce_rows(lambda row: None)

            assert runtime.columns == ("s", "p", "o")

    def test_malformed_query_aborts_run(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        emitted: list[OutputRow] = []
        settings = _settings(sparql="SELECT ?s WHERE { ?s ?p ?o ")
        runtime = StepRuntime(settings, transport=repository_store.transport, environ={})
        assert runtime.init()

        with pytest.raises(QueryError):
            runtime.produce_rows(emitted.append)

        assert emitted == []
        runtime.dispose()  # Should not raise
        assert runtime.state is StepState.CLOSED

    def test_midstream_failure_keeps_emitted_rows(self) -> None:
        """A bad binding aborts the rest of the run; earlier rows stay out."""
        from sparqlstep.engine.runtime import StepRuntime

        store = FakeTripleStore(
            columns=["x"],
            bindings=[{"x": literal("1")}, {"x": "bad"}, {"x": literal("3")}],
        )
        emitted: list[OutputRow] = []
        settings = _settings(sparql="SELECT ?x WHERE { ?s ?p ?x }")
        runtime = StepRuntime(settings, transport=store.transport, environ={})
        assert runtime.init()

        with pytest.raises(QueryError):
            runtime.produce_rows(emitted.append)

        assert [row.values for row in emitted] == [("1",)]
        assert runtime.rows_written == 1
        runtime.dispose()
        assert runtime.state is StepState.CLOSED

    def test_second_produce_is_forbidden(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        with StepRuntime(_settings(), transport=repository_store.transport, environ={}) as runtime:
            runtime.init()
            runtime.produce_rows(lambda row: None)

            with pytest.raises(StepLifecycleError, match="already"):
                runtime.produce_rows(lambda row: None)

    def test_produce_before_init_is_forbidden(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        runtime = StepRuntime(_settings(), transport=repository_store.transport, environ={})

        with pytest.raises(StepLifecycleError, match="idle"):
            runtime.produce_rows(lambda row: None)

    def test_produce_after_failed_init_is_forbidden(
        self, unreachable_store: FakeTripleStore
    ) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        runtime = StepRuntime(_settings(), transport=unreachable_store.transport, environ={})
        runtime.init()

        with pytest.raises(StepLifecycleError):
            runtime.produce_rows(lambda row: None)

    def test_emitter_failure_propagates(self, repository_store: FakeTripleStore) -> None:
        """Errors raised by the consumer are not swallowed."""
        from sparqlstep.engine.runtime import StepRuntime

        def refuse(row: OutputRow) -> None:
            raise RuntimeError("downstream full")

        with StepRuntime(_settings(), transport=repository_store.transport, environ={}) as runtime:
            runtime.init()

            with pytest.raises(RuntimeError, match="downstream full"):
                runtime.produce_rows(refuse)

        assert runtime.state is StepState.CLOSED

    def test_rows_is_pull_based(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        with StepRuntime(_settings(), transport=repository_store.transport, environ={}) as runtime:
            runtime.init()
            rows = runtime.rows()

            first = next(rows)

            assert first.values == ("a",)
            assert runtime.rows_written == 1


class TestDispose:
    """dispose() is valid from any state and idempotent."""

    def test_dispose_from_idle(self) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        runtime = StepRuntime(_settings(), environ={})

        runtime.dispose()

        assert runtime.state is StepState.CLOSED

    def test_dispose_twice(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        runtime = StepRuntime(_settings(), transport=repository_store.transport, environ={})
        runtime.init()

        runtime.dispose()
        runtime.dispose()  # Should not raise

        assert runtime.state is StepState.CLOSED

    def test_produce_after_dispose_is_forbidden(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        runtime = StepRuntime(_settings(), transport=repository_store.transport, environ={})
        runtime.init()
        runtime.dispose()

        with pytest.raises(StepLifecycleError, match="closed"):
            runtime.produce_rows(lambda row: None)

    def test_context_manager_disposes_on_error(self, repository_store: FakeTripleStore) -> None:
        from sparqlstep.engine.runtime import StepRuntime

        with pytest.raises(ValueError):
            with StepRuntime(
                _settings(), transport=repository_store.transport, environ={}
            ) as runtime:
                runtime.init()
                raise ValueError("host aborted")

        assert runtime.state is StepState.CLOSED
