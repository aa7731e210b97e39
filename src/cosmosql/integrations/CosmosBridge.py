# cosmosql/integrations/CosmosBridge.py
"""CosmosBridge.py
========================
Page source backed by Azure Cosmos DB (`azure-cosmos`).

This module is the backend of query execution and contains no UI code:

- `create_client` builds a `CosmosClient` from the settings (rate-limit
  retries, connection mode).
- `CosmosPageSource.open` returns a `CosmosPageCursor`, the execution context
  of one query. It owns its client and closes it on exit.
- `CosmosPageCursor.fetch` returns one `Page` per call. Remote failures are
  returned as failed pages, never raised.

The Python SDK only talks to Cosmos DB through the gateway. A "Direct" setting
is accepted for compatibility and served through the gateway.

`has_more` comes from the pager's continuation token. Cross-partition queries
do not always expose one; only then does a fetch also pull the following
page and keep it until the next call.
"""

import json
import logging
from typing import Any, Iterator, Optional

from azure.core.exceptions import AzureError
from azure.cosmos import CosmosClient, documents, exceptions

from cosmosql.core.Paging import Page
from cosmosql.utils.settings import ConnectionMode, Settings
from cosmosql.utils.utils import QUERY_METRICS_LABEL


QUERY_METRICS_HEADER = "x-ms-documentdb-query-metrics"
REQUEST_CHARGE_HEADER = "x-ms-request-charge"


def create_client(settings: Settings) -> CosmosClient:
    """Creates a client for the configured account."""
    if settings.mode is ConnectionMode.DIRECT:
        logging.info("CosmosBridge: direct mode is not available in the Python SDK, using gateway.")
    return CosmosClient(
        settings.endpoint,
        credential=settings.key,
        connection_mode=documents.ConnectionMode.Gateway,
        retry_total=settings.max_retry_attempts,
    )


def _error_message(exc: Exception) -> str:
    if isinstance(exc, exceptions.CosmosHttpResponseError):
        return exc.message or str(exc)
    return str(exc)


# ================= CosmosPageCursor Class ==============================
class CosmosPageCursor:
    """Lazy page sequence of one query against one container."""

    def __init__(
        self,
        client: CosmosClient,
        database: str,
        container: str,
        query: str,
        page_size: int,
        metrics: bool = False,
    ) -> None:
        self.client = client
        self.query = query
        self.page_size = page_size
        self.metrics = metrics
        self._container = client.get_database_client(database).get_container_client(container)
        self._pages: Optional[Iterator[Any]] = None
        self._pending: Optional[Page] = None
        self._exhausted = False
        self._closed = False

    @property
    def has_more(self) -> bool:
        return not self._closed and (self._pending is not None or not self._exhausted)

    def _start(self) -> Iterator[Any]:
        items = self._container.query_items(
            query=self.query,
            enable_cross_partition_query=True,
            max_item_count=self.page_size,
            populate_query_metrics=self.metrics,
        )
        return items.by_page()

    def _diagnostics(self) -> dict[str, Any]:
        headers = dict(self._container.client_connection.last_response_headers or {})
        diagnostics: dict[str, Any] = {"headers": headers}
        if QUERY_METRICS_HEADER in headers:
            diagnostics[QUERY_METRICS_LABEL] = headers[QUERY_METRICS_HEADER]
        return diagnostics

    def _pull(self) -> Optional[Page]:
        """Fetches the next page from the service; None once the query is exhausted."""
        try:
            if self._pages is None:
                self._pages = self._start()
            documents_page = next(self._pages, None)
            if documents_page is None:
                self._exhausted = True
                return None
            docs = list(documents_page)
        except (exceptions.CosmosHttpResponseError, AzureError) as exc:
            logging.warning("CosmosBridge: page fetch failed: %s", exc)
            self._exhausted = True
            return Page.failure(_error_message(exc))

        content = json.dumps({"Documents": docs, "_count": len(docs)}, default=str)
        logging.debug("CosmosBridge: fetched %d document(s)", len(docs))
        return Page(ok=True, content=content, diagnostics=self._diagnostics())

    def _continuation(self) -> Optional[str]:
        return getattr(self._pages, "continuation_token", None)

    def fetch(self) -> Page:
        """Returns the next page, or a failed page when the service call failed."""
        page = self._pending if self._pending is not None else self._pull()
        self._pending = None
        if page is None:
            return Page(ok=True, content=json.dumps({"Documents": [], "_count": 0}))
        if page.ok and not self._exhausted and not self._continuation():
            self._pending = self._pull()
        return page

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self.client.__exit__(None, None, None)
        except Exception:
            logging.debug("CosmosBridge: client close failed", exc_info=True)

    def __enter__(self) -> "CosmosPageCursor":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


# ================= CosmosPageSource Class ==============================
class CosmosPageSource:
    """Opens one `CosmosPageCursor` (with its own client) per query."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.page_size = settings.page_size

    def open(self, query: str) -> CosmosPageCursor:
        client = create_client(self.settings)
        return CosmosPageCursor(
            client,
            self.settings.database,
            self.settings.container,
            query,
            self.page_size,
            metrics=self.settings.metrics,
        )
