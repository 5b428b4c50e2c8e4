# gesture_graph/ingestion/loader.py
"""
Graph loading: query service -> GraphIngestor -> GraphStore.

Failures are reported as LoadResult values for the caller to display.
The active model is only replaced by a successful, non-empty result
from the newest request; otherwise the previous model stays in place.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .quine import QueryServiceError, QuineClient
from ..graph.ingestor import GraphIngestor
from ..graph.store import GraphStore
from ..logging import get_ingestion_logger

logger = get_ingestion_logger("loader")

EMPTY_RESULT_WARNING = (
    "Query returned 0 nodes. Check if your graph is empty or the query logic."
)

ClientFactory = Callable[[str], QuineClient]


@dataclass
class LoadResult:
    """Outcome of one load request."""
    ticket: int
    success: bool
    published: bool = False
    node_count: int = 0
    link_count: int = 0
    error: Optional[str] = None
    warning: Optional[str] = None
    status_code: Optional[int] = None
    completed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def superseded(self) -> bool:
        """True when the load worked but a newer request had already published."""
        return self.success and not self.published and self.node_count > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ticket": self.ticket,
            "success": self.success,
            "published": self.published,
            "superseded": self.superseded,
            "node_count": self.node_count,
            "link_count": self.link_count,
            "error": self.error,
            "warning": self.warning,
            "completed_at": self.completed_at.isoformat(),
        }


class GraphLoader:
    """
    Runs queries and publishes their graphs.

    Usage:
        loader = GraphLoader(store, default_url="http://localhost:8082")
        result = loader.load(INITIAL_QUERY)
        if not result.success:
            show(result.error)
    """

    def __init__(
        self,
        store: GraphStore,
        default_url: str,
        ingestor: Optional[GraphIngestor] = None,
        client_factory: Optional[ClientFactory] = None,
        timeout: float = 10.0,
    ):
        self.store = store
        self.default_url = default_url
        self.ingestor = ingestor or GraphIngestor()
        self.timeout = timeout
        self.client_factory = client_factory or (
            lambda url: QuineClient(url, timeout=self.timeout)
        )

    def load(
        self,
        query: str,
        parameters: Optional[Dict[str, Any]] = None,
        url: Optional[str] = None,
    ) -> LoadResult:
        """
        Execute `query`, ingest the result, and publish it if it is the newest.

        Args:
            query: Cypher text
            parameters: Query parameters
            url: Query service base URL (defaults to the loader's URL)

        Returns:
            LoadResult describing what happened
        """
        ticket = self.store.begin()
        client = self.client_factory(url or self.default_url)

        try:
            raw = client.execute(query, parameters or {})
        except QueryServiceError as e:
            logger.bind(ticket=ticket).error("graph_load_failed", error=str(e))
            return LoadResult(
                ticket=ticket,
                success=False,
                error=str(e),
                status_code=e.status_code,
            )

        return self.publish_raw(ticket, raw)

    def publish_raw(self, ticket: int, raw: Any) -> LoadResult:
        """Ingest an already-fetched payload under `ticket`."""
        model = self.ingestor.ingest(raw)

        if model.is_empty:
            logger.bind(ticket=ticket).warning("graph_load_empty")
            return LoadResult(
                ticket=ticket,
                success=True,
                published=False,
                warning=EMPTY_RESULT_WARNING,
            )

        published = self.store.publish(ticket, model)
        return LoadResult(
            ticket=ticket,
            success=True,
            published=published,
            node_count=model.node_count,
            link_count=model.link_count,
        )


_loader: Optional[GraphLoader] = None


def get_graph_loader() -> GraphLoader:
    """Get or create the process-wide loader, bound to the process-wide store."""
    global _loader
    if _loader is None:
        from ..graph.store import get_graph_store
        from ..settings import settings
        _loader = GraphLoader(
            store=get_graph_store(),
            default_url=settings.quine_url,
            timeout=settings.quine_timeout_seconds,
        )
    return _loader
