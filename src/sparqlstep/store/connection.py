# src/sparqlstep/store/connection.py
"""Connection to a remote SPARQL triple-store over HTTP.

Owns one httpx.Client and at most one open TupleResult. Speaks the
SPARQL 1.1 protocol: queries are POSTed as the ``query`` form field and
results are requested as SPARQL JSON.

No business logic lives here - only resource management and translation
of transport/HTTP failures into StoreConnectionError and QueryError.
"""

from collections.abc import Iterator
from types import TracebackType
from typing import Any

import httpx
import structlog

from sparqlstep.contracts import (
    ConnectionState,
    QueryError,
    StoreConnectionError,
    StoreStateError,
)

logger = structlog.get_logger()

RESULTS_JSON = "application/sparql-results+json"

# Statuses on the opening probe that mean "this is not a usable endpoint".
# Anything else (e.g. 400 "missing query parameter") proves the store answered.
_UNUSABLE_ENDPOINT_STATUSES = frozenset({401, 403, 404, 407})

Binding = dict[str, str]


def _lexical(term: Any) -> str:
    """Lexical form of one RDF term from a SPARQL JSON binding.

    IRIs render as the IRI, literals as their label (language tag and
    datatype dropped), blank nodes as their label.
    """
    try:
        return str(term["value"])
    except (KeyError, TypeError) as e:
        raise QueryError(f"Malformed binding term: {term!r}") from e


def _body_preview(response: httpx.Response) -> str:
    text = response.text.strip() if response.content else ""
    return text[:500] or response.reason_phrase


class TupleResult:
    """Result handle for one tuple query.

    ``columns`` is fixed for the lifetime of the result and available
    before the first row is read. Iteration is single-pass; closing the
    handle (directly, or by issuing a new query on the same connection)
    invalidates any iterator still in progress.
    """

    def __init__(self, columns: list[str], bindings: list[dict[str, Any]]) -> None:
        self._columns = list(columns)
        self._bindings = bindings
        self._consumed = False
        self._closed = False

    @property
    def columns(self) -> list[str]:
        """Variable names in result order."""
        return list(self._columns)

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[Binding]:
        if self._closed:
            raise StoreStateError("TupleResult is closed")
        if self._consumed:
            raise StoreStateError("TupleResult can only be iterated once")
        self._consumed = True
        return self._iter_bindings()

    def _iter_bindings(self) -> Iterator[Binding]:
        for raw in self._bindings:
            if self._closed:
                raise QueryError("Result handle was closed while rows were being read")
            if not isinstance(raw, dict):
                raise QueryError(f"Malformed binding row: {raw!r}")
            # Unbound variables are simply absent from the mapping
            yield {name: _lexical(term) for name, term in raw.items()}

    def close(self) -> None:
        """Release the buffered bindings. Idempotent."""
        self._closed = True
        self._bindings = []


def _parse_tuple_result(payload: Any) -> TupleResult:
    """Build a TupleResult from a decoded SPARQL JSON document."""
    try:
        columns = payload["head"]["vars"]
    except (KeyError, TypeError) as e:
        raise QueryError("Response is not a tuple query result (no head.vars)") from e
    if not isinstance(columns, list):
        raise QueryError(f"Malformed head.vars: {columns!r}")

    results = payload.get("results") or {}
    bindings = results.get("bindings", []) if isinstance(results, dict) else None
    if not isinstance(bindings, list):
        raise QueryError("Malformed results.bindings in response")

    return TupleResult([str(c) for c in columns], bindings)


class StoreConnection:
    """One live connection to one triple-store endpoint.

    States: DISCONNECTED -> CONNECTED -> DISCONNECTED.

    Example:
        with StoreConnection() as conn:
            conn.open("http://localhost:8080/openrdf-sesame/repositories/SYSTEM")
            result = conn.execute("SELECT ?s WHERE { ?s ?p ?o } LIMIT 1")
            print(result.columns)
    """

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Configure, but do not open, the connection.

        Args:
            timeout: Transport timeout in seconds. None means no timeout.
            transport: Optional httpx transport (e.g. httpx.MockTransport)
        """
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.Client | None = None
        self._endpoint_url: str | None = None
        self._result: TupleResult | None = None
        self._state = ConnectionState.DISCONNECTED

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def endpoint_url(self) -> str | None:
        """URL of the open endpoint, or None when disconnected."""
        return self._endpoint_url

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    def open(self, endpoint_url: str) -> None:
        """Establish the HTTP session and check the endpoint answers.

        Raises:
            StoreStateError: If the connection is already open
            StoreConnectionError: If the endpoint is unreachable or unusable
        """
        if self._state is ConnectionState.CONNECTED:
            raise StoreStateError(
                f"Connection already open to {self._endpoint_url!r}; close() it first"
            )

        client = httpx.Client(
            timeout=self._timeout,
            transport=self._transport,
            headers={"Accept": RESULTS_JSON},
        )
        try:
            response = client.get(endpoint_url)
        except (httpx.RequestError, httpx.InvalidURL) as e:
            client.close()
            logger.warning("Triple-store unreachable", endpoint=endpoint_url, error=str(e))
            raise StoreConnectionError(endpoint_url, str(e)) from e

        status = response.status_code
        if response.is_redirect:
            # Queries are POSTed and redirects are not followed
            client.close()
            location = response.headers.get("location", "")
            logger.warning(
                "Triple-store endpoint redirects", endpoint=endpoint_url, status=status, location=location
            )
            raise StoreConnectionError(
                endpoint_url,
                f"Endpoint redirects to {location!r}; configure that URL instead",
                status_code=status,
            )
        if status in _UNUSABLE_ENDPOINT_STATUSES or status >= 500:
            client.close()
            logger.warning("Triple-store refused connection", endpoint=endpoint_url, status=status)
            raise StoreConnectionError(endpoint_url, _body_preview(response), status_code=status)

        self._client = client
        self._endpoint_url = endpoint_url
        self._state = ConnectionState.CONNECTED
        logger.info("Connected to triple-store", endpoint=endpoint_url)

    def execute(self, query_text: str) -> TupleResult:
        """Submit a tuple query verbatim and return its result handle.

        Any result handle from a previous query is closed first.

        Raises:
            StoreStateError: If the connection is not open
            QueryError: If the store rejects or fails to evaluate the query
        """
        if self._client is None or self._endpoint_url is None:
            raise StoreStateError("execute() requires an open connection")

        self._close_result()

        try:
            response = self._client.post(
                self._endpoint_url,
                data={"query": query_text},
                headers={"Accept": RESULTS_JSON},
            )
        except httpx.RequestError as e:
            raise QueryError(f"Transport failure: {e}", query=query_text) from e

        if response.is_error:
            raise QueryError(
                _body_preview(response),
                status_code=response.status_code,
                query=query_text,
            )

        # Stores and proxies may answer 200 with an HTML error page
        try:
            payload = response.json()
        except ValueError as e:
            content_type = response.headers.get("content-type", "unknown")
            raise QueryError(
                f"Response is not SPARQL JSON results (content-type: {content_type})",
                status_code=response.status_code,
                query=query_text,
            ) from e

        result = _parse_tuple_result(payload)
        self._result = result
        logger.debug(
            "Query executed",
            endpoint=self._endpoint_url,
            columns=result.columns,
        )
        return result

    def close(self) -> None:
        """Release the result handle and the HTTP session.

        Safe to call repeatedly, and after a failed open() or execute().
        Never raises: teardown failures are logged and discarded.
        """
        self._close_result()

        client, self._client = self._client, None
        endpoint, self._endpoint_url = self._endpoint_url, None
        self._state = ConnectionState.DISCONNECTED

        if client is None:
            return
        try:
            client.close()
        except Exception as e:
            # Log but don't raise - cleanup should be best-effort
            logger.debug("Ignoring error while closing connection", endpoint=endpoint, error=str(e))
        else:
            logger.debug("Connection closed", endpoint=endpoint)

    def _close_result(self) -> None:
        result, self._result = self._result, None
        if result is None:
            return
        try:
            result.close()
        except Exception as e:
            logger.debug("Ignoring error while closing result", error=str(e))

    def __enter__(self) -> "StoreConnection":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
