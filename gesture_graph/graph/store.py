# gesture_graph/graph/store.py
"""
Holder for the active GraphModel.

The render loop reads `snapshot` every tick without locking. Writers
publish a fully built model in one reference assignment, so a reader
sees either the old model or the new one, never a partial one.

Overlapping ingestions are sequenced with tickets: each request takes
a ticket from begin(), and publish() drops a completion whose ticket is
older than the last published one.
"""

import itertools
import threading
from typing import Optional

from .models import GraphModel
from ..logging import get_logger

logger = get_logger(__name__)


class GraphStore:
    """
    Atomic, last-issued-wins holder for the rendered graph.

    Usage:
        store = GraphStore()
        ticket = store.begin()
        model = ingestor.ingest(raw)
        store.publish(ticket, model)
    """

    def __init__(self, initial: Optional[GraphModel] = None):
        self._model = initial or GraphModel.empty()
        self._tickets = itertools.count(1)
        self._published_ticket = 0
        self._lock = threading.Lock()

    @property
    def snapshot(self) -> GraphModel:
        """Current model. Never partially built."""
        return self._model

    @property
    def published_ticket(self) -> int:
        return self._published_ticket

    def begin(self) -> int:
        """Issue a ticket for a new ingestion request."""
        with self._lock:
            return next(self._tickets)

    def publish(self, ticket: int, model: GraphModel) -> bool:
        """
        Publish a model produced for `ticket`.

        Returns:
            True if the model became active, False if a newer request had
            already published and this completion was discarded
        """
        with self._lock:
            if ticket < self._published_ticket:
                logger.info(
                    "stale_graph_discarded",
                    ticket=ticket,
                    published_ticket=self._published_ticket,
                )
                return False
            self._published_ticket = ticket
            self._model = model

        logger.info(
            "graph_published",
            ticket=ticket,
            nodes=model.node_count,
            links=model.link_count,
        )
        return True

    def replace(self, model: GraphModel) -> None:
        """Publish unconditionally, superseding every ticket issued so far."""
        self.publish(self.begin(), model)


_graph_store: Optional[GraphStore] = None


def get_graph_store() -> GraphStore:
    """Get the process-wide graph store."""
    global _graph_store
    if _graph_store is None:
        _graph_store = GraphStore()
    return _graph_store
