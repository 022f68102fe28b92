"""
Service layer for the quotation request flow.
"""

from quotation.config.settings import ServerConfig
from quotation.deadline import Deadline
from quotation.models import Quotation
from quotation.server.database import QuotationStore
from quotation.server.errors import PersistenceError, StoreError
from quotation.server.upstream import UpstreamClient


class QuotationService:
    """Fetches a quotation upstream and stores it, each step under its own deadline."""

    def __init__(
        self, config: ServerConfig, upstream: UpstreamClient, store: QuotationStore
    ):
        self.config = config
        self.upstream = upstream
        self.store = store

    def fetch_and_store(self, inbound: Deadline) -> Quotation:
        """
        Fetch the current quotation and persist it.

        Both deadlines are derived from ``inbound``, so a slow upstream does
        not eat into the database budget.

        Raises:
            QuotationError: On the first failing step
        """
        request_deadline = inbound.derive(self.config.request_timeout)
        quotation = self.upstream.fetch(request_deadline, self.config.request_timeout)

        store_deadline = inbound.derive(self.config.database_timeout)
        try:
            self.store.save(quotation, store_deadline, self.config.database_timeout)
        except StoreError as e:
            raise PersistenceError(
                f"GET /cotacao - failed to save quotation to database: {e}"
            ) from e

        return quotation
