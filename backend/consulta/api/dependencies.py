"""
Shared request helpers and FastAPI dependencies
"""
from typing import Optional

from consulta.core.exceptions import MissingParameterError
from consulta.services.customer_service import CustomerService
from consulta.services.diagnostic_service import OrderDiagnosticService


def require_param(value: Optional[str], name: str) -> str:
    """Reject missing/blank parameters before anything touches the store"""
    if value is None or not value.strip():
        raise MissingParameterError(name)
    return value.strip()


def get_customer_service() -> CustomerService:
    return CustomerService()


def get_diagnostic_service() -> OrderDiagnosticService:
    return OrderDiagnosticService()
