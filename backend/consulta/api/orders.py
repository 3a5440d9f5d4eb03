"""
Orders API Endpoints
Order listing and order diagnostics

Author: TM3
Date: 2025-10-03
Updated: 2025-10-17 (refactor: use OrderRepository for data access)
"""
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from consulta.api.dependencies import get_diagnostic_service, require_param
from consulta.core.database import store_session
from consulta.core.exceptions import InvalidFilterError
from consulta.repositories.order_repository import OrderFilter, OrderRepository
from consulta.services.diagnostic_service import OrderDiagnosticService

router = APIRouter()


@router.get("")
def get_orders(
    cliente: Optional[str] = Query(None, description="Part of the customer name"),
    data: Optional[str] = Query(None, description="Emission date (YYYY-MM-DD)")
):
    """
    List orders, optionally filtered by customer name and emission date

    Most recent first.
    """
    emission_date = None
    if data:
        try:
            emission_date = date.fromisoformat(data.strip())
        except ValueError:
            raise InvalidFilterError(f"Data inválida: '{data}' (use AAAA-MM-DD)")

    order_filter = OrderFilter(cliente=(cliente or "").strip() or None, data=emission_date)
    with store_session() as session:
        orders = OrderRepository(session).find_all(order_filter)

    return [order.to_dict() for order in orders]


@router.get("/diagnostico")
def diagnose_order(
    pedido: Optional[str] = Query(None, description="Order reference (numeric key or PED-style code)"),
    service: OrderDiagnosticService = Depends(get_diagnostic_service)
):
    """
    Explain why an order reference does or does not lead to a usable order

    Always answers with the same schema, including on store failures.
    """
    reference = require_param(pedido, "pedido")
    return service.diagnose(reference).to_dict()
