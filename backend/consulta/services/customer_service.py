"""
Customer Lookup Service

Request-level operations behind the /clientes endpoints. Each call opens
one store session, classifies the identifier, resolves it and, where
needed, folds the rows with the aggregator.
"""
import logging
from typing import Any, Callable, ContextManager, Dict, List, Optional

from consulta.core.config import settings
from consulta.core.database import StoreSession, store_session
from consulta.domain.identifier import classify
from consulta.domain.order import ProductHistoryRow
from consulta.repositories.customer_repository import CustomerRepository
from consulta.repositories.order_repository import OrderRepository, ProductSource
from consulta.services.aggregator import aggregate_financials, aggregate_product_history
from consulta.services.resolver import IdentifierResolver

logger = logging.getLogger(__name__)


class CustomerService:

    def __init__(
        self,
        session_factory: Callable[[], ContextManager[StoreSession]] = store_session,
        order_limit: Optional[int] = None
    ):
        self.session_factory = session_factory
        self.order_limit = order_limit if order_limit is not None else settings.RESOLVE_ORDER_LIMIT

    def _resolver(self, session: StoreSession) -> IdentifierResolver:
        return IdentifierResolver(
            CustomerRepository(session),
            OrderRepository(session),
            order_limit=self.order_limit,
        )

    def resolve(self, identifier: str) -> Dict[str, Any]:
        """
        Returns:
            {"customer": first match or None, "orders": [...], "kind", "canonical"}
        """
        classified = classify(identifier)
        with self.session_factory() as session:
            resolution = self._resolver(session).resolve(classified)

        customer = resolution.customer
        return {
            "kind": classified.kind.value,
            "canonical": classified.canonical,
            "customer": customer.to_dict() if customer else None,
            "orders": [order.to_dict() for order in resolution.orders],
        }

    def financial_history(self, identifier: str) -> Dict[str, Any]:
        """Movements of the matched customer(s) plus inflow/outflow totals"""
        classified = classify(identifier)
        with self.session_factory() as session:
            movements = self._resolver(session).movements(classified)

        totals = aggregate_financials(movements)
        logger.info(f"Financial history: {len(movements)} movement(s), net {totals.net_balance}")
        return {
            "movements": [movement.to_dict() for movement in movements],
            "totals": totals.to_dict(),
        }

    def product_history(
        self,
        identifier: str,
        source: ProductSource = ProductSource.ORDER_LINES
    ) -> List[ProductHistoryRow]:
        classified = classify(identifier)
        with self.session_factory() as session:
            rows = self._resolver(session).product_rows(classified, source)
        return aggregate_product_history(rows)
