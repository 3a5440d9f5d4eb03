"""
Customers API Endpoints
Identifier resolution, financial history and product history

The identifier may be a CNPJ (any punctuation) or part of a name.

Author: TM3
Date: 2025-10-17
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from consulta.api.dependencies import get_customer_service, require_param
from consulta.core.exceptions import InvalidFilterError
from consulta.repositories.order_repository import ProductSource
from consulta.services.customer_service import CustomerService

router = APIRouter()


@router.get("/resolver")
def resolve_customer(
    identificador: Optional[str] = Query(None, description="CNPJ or part of the customer name"),
    service: CustomerService = Depends(get_customer_service)
):
    """
    Resolve a customer and their orders

    Returns the first matching customer (or null) and every matching order,
    most recent first.
    """
    identifier = require_param(identificador, "identificador")
    return service.resolve(identifier)


@router.get("/financeiro")
def get_financial_history(
    identificador: Optional[str] = Query(None, description="CNPJ or part of the customer name"),
    service: CustomerService = Depends(get_customer_service)
):
    """Financial movements with total inflow, total outflow and net balance"""
    identifier = require_param(identificador, "identificador")
    return service.financial_history(identifier)


@router.get("/produtos")
def get_product_history(
    identificador: Optional[str] = Query(None, description="CNPJ or part of the customer name"),
    fonte: str = Query("itens", description="Row source: itens (order lines) or vendas (product sales)"),
    service: CustomerService = Depends(get_customer_service)
):
    """Per-product purchase history, most frequently ordered first"""
    identifier = require_param(identificador, "identificador")
    try:
        source = ProductSource(fonte.strip().lower())
    except ValueError:
        raise InvalidFilterError(f"Fonte inválida: '{fonte}' (use 'itens' ou 'vendas')")

    history = service.product_history(identifier, source)
    return [row.to_dict() for row in history]
