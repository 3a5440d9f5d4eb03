"""
Cross-reference aggregation

Pure folds over rows already fetched by the resolver. No store access.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple, Union

from consulta.domain.customer import FinancialMovement, FinancialTotals, MovementDirection
from consulta.domain.formatting import to_decimal
from consulta.domain.order import OrderLine, ProductHistoryRow, ProductSale

ProductRow = Union[OrderLine, ProductSale]


def aggregate_financials(movements: Iterable[FinancialMovement]) -> FinancialTotals:
    """
    Sum movements by direction

    Missing or non-numeric amounts count as zero; movements with an unknown
    direction count towards neither total.
    """
    inflow = Decimal("0")
    outflow = Decimal("0")

    for movement in movements:
        amount = to_decimal(movement.valor) or Decimal("0")
        direction = movement.direction
        if direction is MovementDirection.INFLOW:
            inflow += amount
        elif direction is MovementDirection.OUTFLOW:
            outflow += amount

    return FinancialTotals(
        total_inflow=inflow,
        total_outflow=outflow,
        net_balance=inflow - outflow,
    )


@dataclass
class _ProductBucket:
    orders: Set[Any] = field(default_factory=set)
    quantity: Decimal = Decimal("0")
    first: Optional[date] = None
    last: Optional[date] = None


def _order_identity(row: ProductRow) -> Any:
    return row.pedido_id if row.pedido_id is not None else row.pedido_ref


def aggregate_product_history(rows: Iterable[ProductRow]) -> List[ProductHistoryRow]:
    """
    Group order lines (or product sales) by exact (code, description)

    Returns rows ordered by distinct order count desc, then code and
    description, so the result does not depend on input order.
    """
    buckets: Dict[Tuple[Optional[str], Optional[str]], _ProductBucket] = {}

    for row in rows:
        key = (row.codigo_produto, row.descricao_produto)
        bucket = buckets.setdefault(key, _ProductBucket())
        bucket.orders.add(_order_identity(row))
        bucket.quantity += to_decimal(row.quantidade) or Decimal("0")

        order_date = row.data_emissao
        if order_date is not None:
            if bucket.first is None or order_date < bucket.first:
                bucket.first = order_date
            if bucket.last is None or order_date > bucket.last:
                bucket.last = order_date

    history = [
        ProductHistoryRow(
            codigo_produto=code,
            descricao_produto=description,
            total_pedidos=len(bucket.orders),
            quantidade_total=bucket.quantity,
            primeira_compra=bucket.first,
            ultima_compra=bucket.last,
        )
        for (code, description), bucket in buckets.items()
    ]

    history.sort(key=lambda h: (
        -h.total_pedidos,
        h.codigo_produto is None, h.codigo_produto or "",
        h.descricao_produto is None, h.descricao_produto or "",
    ))
    return history
