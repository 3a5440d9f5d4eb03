"""
Identifier Resolver

Turns a classified identifier into store filters and runs them:

- STRUCTURED_ID (CNPJ): exact match on the digits-only form of the stored
  CNPJ, whatever punctuation it was saved with
- FREE_TEXT: case-insensitive substring over names and CNPJ

Nothing is disambiguated here. Every matching customer and order is
returned; Resolution.customer simply exposes the first customer match.
"""
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Union

from consulta.domain.customer import Customer, FinancialMovement
from consulta.domain.identifier import ClassifiedIdentifier
from consulta.domain.order import Order, OrderLine, ProductSale
from consulta.repositories.customer_repository import CustomerRepository
from consulta.repositories.order_repository import OrderRepository, ProductSource
from consulta.repositories.query_builder import AnyOf, Contains, DigitsEqual, Predicate

logger = logging.getLogger(__name__)


def customer_predicate(identifier: ClassifiedIdentifier) -> Predicate:
    """Filter over `clientes`"""
    if identifier.is_structured:
        return DigitsEqual("cnpj", identifier.canonical)
    return AnyOf((
        Contains("razao_social", identifier.canonical),
        Contains("nome_fantasia", identifier.canonical),
        Contains("cnpj", identifier.canonical),
    ))


def denormalized_customer_predicate(identifier: ClassifiedIdentifier) -> Predicate:
    """Filter over tables carrying nome_cliente/cnpj_cliente (pedidos, movimentacoes_financeiras)"""
    if identifier.is_structured:
        return DigitsEqual("cnpj_cliente", identifier.canonical)
    return AnyOf((
        Contains("nome_cliente", identifier.canonical),
        Contains("cnpj_cliente", identifier.canonical),
    ))


@dataclass
class Resolution:
    identifier: ClassifiedIdentifier
    customers: List[Customer] = field(default_factory=list)
    orders: List[Order] = field(default_factory=list)

    @property
    def customer(self) -> Optional[Customer]:
        return self.customers[0] if self.customers else None


class IdentifierResolver:
    """Resolves identifiers against customers, orders, movements and product rows"""

    def __init__(
        self,
        customers: CustomerRepository,
        orders: OrderRepository,
        order_limit: Optional[int] = None
    ):
        self.customers = customers
        self.orders = orders
        self.order_limit = order_limit

    def resolve(self, identifier: ClassifiedIdentifier) -> Resolution:
        """
        Customers and orders for identifier

        Store calls run one after the other (customers, then orders).
        Zero matches is a valid, empty Resolution.
        """
        customers = self.customers.find(customer_predicate(identifier))
        orders = self.orders.find(denormalized_customer_predicate(identifier), limit=self.order_limit)

        logger.info(
            f"Resolved {identifier.kind.value} identifier: "
            f"{len(customers)} customer(s), {len(orders)} order(s)"
        )
        if len(customers) > 1:
            logger.debug(f"Ambiguous customer match ({len(customers)} rows), returning the first")

        return Resolution(identifier=identifier, customers=customers, orders=orders)

    def movements(self, identifier: ClassifiedIdentifier) -> List[FinancialMovement]:
        return self.customers.find_movements(denormalized_customer_predicate(identifier))

    def product_rows(
        self,
        identifier: ClassifiedIdentifier,
        source: ProductSource = ProductSource.ORDER_LINES
    ) -> List[Union[OrderLine, ProductSale]]:
        return self.orders.find_product_rows(denormalized_customer_predicate(identifier), source)
