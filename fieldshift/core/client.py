"""Content store client for querying and mutating documents over HTTP."""

import json
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any, Protocol, runtime_checkable

import httpx

from fieldshift import __version__
from fieldshift.core.exceptions import (
    RevisionConflictError,
    StoreAuthError,
    StoreConnectionError,
    StoreOperationError,
)
from fieldshift.core.settings import StoreSettings

# Request lines would otherwise interleave with the batch listings on stdout
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

REVISION_ERROR_TYPES = {
    "documentRevisionIDDoesNotMatchError",
    "revisionIdMismatch",
}


@runtime_checkable
class ContentStoreProtocol(Protocol):
    """Protocol for the content store operations the migration needs."""

    async def fetch(self, query: str, params: dict[str, Any] | None = None) -> Any:
        """Run a query and return its result."""
        ...

    async def mutate(self, mutations: list[dict[str, Any]]) -> dict[str, Any]:
        """Apply a list of mutations as one atomic transaction."""
        ...

    def transaction(self) -> "Transaction":
        """Start a new transaction bound to this store."""
        ...


class Transaction:
    """Accumulates patches and commits them as one atomic transaction.

    Example:
        >>> tx = client.transaction()
        >>> tx.patch("doc-1", set={"name": "x"}, unset=["namefield"], if_revision_id="r1")
        >>> await tx.commit()
    """

    def __init__(self, store: ContentStoreProtocol):
        self._store = store
        self._mutations: list[dict[str, Any]] = []

    def patch(
        self,
        document_id: str,
        set: dict[str, Any] | None = None,
        unset: list[str] | None = None,
        if_revision_id: str | None = None,
    ) -> "Transaction":
        """Add a patch on one document.

        Args:
            document_id: The document to patch
            set: Fields to set, by name
            unset: Field names to remove
            if_revision_id: Reject the transaction unless the document
                still has this revision

        Returns:
            The transaction, for chaining
        """
        body: dict[str, Any] = {"id": document_id}
        if set:
            body["set"] = dict(set)
        if unset:
            body["unset"] = list(unset)
        if if_revision_id is not None:
            body["ifRevisionID"] = if_revision_id
        self._mutations.append({"patch": body})
        return self

    @property
    def mutations(self) -> list[dict[str, Any]]:
        return list(self._mutations)

    def __len__(self) -> int:
        return len(self._mutations)

    async def commit(self) -> dict[str, Any]:
        """Submit every accumulated mutation in a single request.

        Raises:
            RevisionConflictError: If any revision precondition failed
        """
        return await self._store.mutate(self._mutations)


def _revision_conflict_ids(error: dict[str, Any]) -> list[str]:
    """Collect document IDs from a mutation error's per-item details."""
    ids = []
    for item in error.get("items") or []:
        item_error = item.get("error") or {}
        if item_error.get("type") in REVISION_ERROR_TYPES and item_error.get("id"):
            ids.append(item_error["id"])
    return ids


def _is_revision_conflict(status_code: int, error: dict[str, Any]) -> bool:
    if status_code == 409:
        return True
    if error.get("type") in REVISION_ERROR_TYPES:
        return True
    if error.get("type") == "mutationError":
        description = str(error.get("description", "")).lower()
        return "revision" in description
    return False


class ContentStoreClient:
    """Async HTTP client for the content store's query and mutate endpoints.

    Requests are sent one at a time and have no client-side timeout; a
    stalled request waits for the store or the network to give up.
    """

    def __init__(
        self,
        settings: StoreSettings,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize the client.

        Args:
            settings: Connection settings
            http_client: Pre-built HTTP client (owned by the caller)
        """
        self.settings = settings
        self.base_url = settings.base_url
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            headers=self._default_headers(),
            timeout=None,
        )

    def _default_headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"fieldshift/{__version__}",
        }
        if self.settings.token:
            headers["Authorization"] = f"Bearer {self.settings.token}"
        return headers

    async def __aenter__(self) -> "ContentStoreClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_http_client:
            await self._http.aclose()

    def transaction(self) -> Transaction:
        return Transaction(self)

    async def fetch(self, query: str, params: dict[str, Any] | None = None) -> Any:
        """Run a query against the configured dataset.

        Args:
            query: Query expression
            params: Query parameters, referenced as ``$name`` in the query

        Returns:
            The ``result`` member of the response
        """
        request_params = {"query": query}
        for name, value in (params or {}).items():
            request_params[f"${name}"] = json.dumps(value)

        logger.debug("Querying %s: %s", self.settings.dataset, query)
        body = await self._request(
            "query",
            "GET",
            f"/data/query/{self.settings.dataset}",
            params=request_params,
        )
        return body.get("result")

    async def mutate(self, mutations: list[dict[str, Any]]) -> dict[str, Any]:
        """Apply mutations as one atomic transaction.

        Args:
            mutations: Mutation objects, e.g. ``{"patch": {...}}``

        Returns:
            The decoded response body (transaction ID and per-document results)

        Raises:
            RevisionConflictError: If an ``ifRevisionID`` precondition failed
        """
        logger.debug(
            "Committing %d mutation(s) to %s", len(mutations), self.settings.dataset
        )
        return await self._request(
            "mutate",
            "POST",
            f"/data/mutate/{self.settings.dataset}",
            params={"returnIds": "true", "visibility": "sync"},
            json={"mutations": mutations},
        )

    async def _request(
        self, operation: str, method: str, path: str, **kwargs
    ) -> dict[str, Any]:
        try:
            response = await self._http.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise StoreConnectionError(original_error=e, endpoint=self.base_url)

        if response.is_success:
            try:
                return response.json()
            except ValueError as e:
                raise StoreOperationError(
                    f"Invalid JSON in {operation} response",
                    operation=operation,
                    status_code=response.status_code,
                    original_error=e,
                )

        self._raise_for_error(operation, response)

    def _raise_for_error(self, operation: str, response: httpx.Response) -> None:
        status_code = response.status_code
        try:
            payload = response.json()
        except ValueError:
            payload = {}

        error = payload.get("error") if isinstance(payload, dict) else None
        if isinstance(error, str):
            error = {"description": payload.get("message") or error}
        elif not isinstance(error, dict):
            error = {}

        description = (
            error.get("description")
            or (payload.get("message") if isinstance(payload, dict) else None)
            or response.reason_phrase
            or f"HTTP {status_code}"
        )

        if status_code in (401, 403):
            raise StoreAuthError(
                f"Content store rejected credentials: {description}",
                status_code=status_code,
            )

        if operation == "mutate" and _is_revision_conflict(status_code, error):
            raise RevisionConflictError(
                f"Transaction rejected: {description}",
                document_ids=_revision_conflict_ids(error),
                status_code=status_code,
            )

        raise StoreOperationError(
            f"Content store {operation} failed ({status_code}): {description}",
            operation=operation,
            status_code=status_code,
        )


class StoreClientManager:
    """Creates content store clients from settings and closes them after use.

    Example:
        >>> manager = StoreClientManager(settings)
        >>> async with manager.get_async_client() as client:
        ...     docs = await client.fetch("*[_type == $type][0...10]", {"type": "post"})
    """

    def __init__(self, settings: StoreSettings):
        self.settings = settings

    @asynccontextmanager
    async def get_async_client(self) -> AsyncGenerator[ContentStoreClient, None]:
        """Get a content store client within a context manager.

        Yields:
            A ContentStoreClient bound to the configured project and dataset
        """
        client = ContentStoreClient(self.settings)
        try:
            yield client
        finally:
            await client.aclose()
