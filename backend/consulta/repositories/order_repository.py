"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders, their line items and product
sales, and returns Order domain models.

Author: TM3
Date: 2025-10-17
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from consulta.core.database import StoreSession
from consulta.domain.order import Order, OrderLine, ProductSale
from consulta.repositories.query_builder import (
    AnyOf,
    Contains,
    Equals,
    EqualsAny,
    FilterSpec,
    OrderBy,
    Predicate,
    Table,
    compile_where,
)

# line items / sales point at either key of the parent order
PARENT_ORDER_JOIN = "(x.pedido_ref = p.numero_pedido OR x.pedido_ref = p.codigo_pedido)"


@dataclass(frozen=True)
class ReferenceKeyStrategy:
    """One way of looking an order up by its reference"""
    name: str
    column: str


# Tried in this order; the first strategy that finds a row wins.
ORDER_KEY_STRATEGIES = (
    ReferenceKeyStrategy("numero_pedido", "numero_pedido"),
    ReferenceKeyStrategy("codigo_pedido", "codigo_pedido"),
)


class ProductSource(str, Enum):
    """Where per-product history is read from"""
    ORDER_LINES = "itens"
    PRODUCT_SALES = "vendas"


@dataclass
class OrderFilter:
    """Optional filters of the order listing"""
    cliente: Optional[str] = None
    data: Optional[date] = None

    def predicates(self) -> List[Predicate]:
        predicates: List[Predicate] = []
        if self.cliente:
            predicates.append(Contains("nome_cliente", self.cliente))
        if self.data:
            predicates.append(Equals("data_emissao", self.data))
        return predicates


def newest_first() -> List[OrderBy]:
    return [OrderBy("data_emissao", descending=True), OrderBy("id")]


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here. Orders are always
    returned most recent emission date first.
    """

    def __init__(self, session: StoreSession):
        self.session = session

    def find(self, predicate: Predicate, limit: Optional[int] = None) -> List[Order]:
        """
        Find orders matching predicate

        Args:
            predicate: filter over `pedidos` columns
            limit: maximum rows (None = unbounded)
        """
        query, params = FilterSpec(
            table=Table.PEDIDOS,
            predicates=[predicate],
            order_by=newest_first(),
            limit=limit,
        ).compile()

        rows = self.session.fetch_all(query, params)
        return [Order(**row) for row in rows]

    def find_all(self, order_filter: OrderFilter) -> List[Order]:
        """Order listing with optional customer-name / emission-date filters"""
        query, params = FilterSpec(
            table=Table.PEDIDOS,
            predicates=order_filter.predicates(),
            order_by=newest_first(),
        ).compile()

        rows = self.session.fetch_all(query, params)
        return [Order(**row) for row in rows]

    def find_by_reference(self, strategy: ReferenceKeyStrategy, reference: str) -> Optional[Order]:
        """
        Find one order whose strategy column equals reference exactly

        Returns:
            The most recent matching order, or None
        """
        query, params = FilterSpec(
            table=Table.PEDIDOS,
            predicates=[Equals(strategy.column, reference)],
            order_by=newest_first(),
            limit=1,
        ).compile()

        row = self.session.fetch_one(query, params)
        return Order(**row) if row else None

    def find_lines(self, reference_keys: List[str]) -> List[OrderLine]:
        """Line items pointing at any of the given order keys, by sequence number"""
        if not reference_keys:
            return []

        query, params = FilterSpec(
            table=Table.ITENS_PEDIDO,
            predicates=[EqualsAny("pedido_ref", reference_keys)],
            order_by=[OrderBy("sequencia"), OrderBy("id")],
        ).compile()

        rows = self.session.fetch_all(query, params)
        return [OrderLine(**row) for row in rows]

    def find_similar(self, reference: str, limit: int) -> List[Dict[str, Any]]:
        """
        Near-miss candidates for a reference

        Orders whose numeric or prefixed key contains reference
        (case-insensitive), that have at least one line item.

        Returns:
            Dicts with the order keys, customer, date, total and total_itens
        """
        where_clause, params = compile_where(
            [AnyOf((Contains("numero_pedido", reference), Contains("codigo_pedido", reference)))],
            alias="p",
        )

        query = f"""
            SELECT
                p.id, p.numero_pedido, p.codigo_pedido, p.nome_cliente,
                p.data_emissao, p.valor_total,
                COUNT(x.id) AS total_itens
            FROM pedidos p
            JOIN itens_pedido x ON {PARENT_ORDER_JOIN}
            WHERE {where_clause}
            GROUP BY p.id, p.numero_pedido, p.codigo_pedido, p.nome_cliente,
                     p.data_emissao, p.valor_total
            HAVING COUNT(x.id) > 0
            ORDER BY p.data_emissao DESC NULLS LAST, p.id
            LIMIT %s
        """

        return self.session.fetch_all(query, params + [limit])

    def find_product_rows(
        self,
        order_predicate: Predicate,
        source: ProductSource = ProductSource.ORDER_LINES
    ) -> List[Union[OrderLine, ProductSale]]:
        """
        Line items (or product sales) of every order matching order_predicate,
        each carrying its parent order's id and emission date
        """
        where_clause, params = compile_where([order_predicate], alias="p")

        if source is ProductSource.PRODUCT_SALES:
            table, model = Table.VENDAS_PRODUTOS, ProductSale
            projection = "x.id, x.pedido_ref, x.codigo_produto, x.descricao_produto, x.quantidade"
        else:
            table, model = Table.ITENS_PEDIDO, OrderLine
            projection = (
                "x.id, x.pedido_ref, x.sequencia, x.codigo_produto, x.descricao_produto, "
                "x.quantidade, x.preco_unitario, x.valor_total"
            )

        query = f"""
            SELECT
                {projection},
                p.id AS pedido_id,
                p.data_emissao
            FROM {table.value} x
            JOIN pedidos p ON {PARENT_ORDER_JOIN}
            WHERE {where_clause}
            ORDER BY p.data_emissao DESC NULLS LAST, x.id
        """

        rows = self.session.fetch_all(query, params)
        return [model(**row) for row in rows]
