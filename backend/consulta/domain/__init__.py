"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.

Author: TM3
Date: 2025-10-17
"""
from consulta.domain.customer import Customer, FinancialMovement, FinancialTotals, MovementDirection
from consulta.domain.diagnostic import DiagnosticState, OrderDiagnostic
from consulta.domain.identifier import ClassifiedIdentifier, IdentifierKind, classify
from consulta.domain.order import Order, OrderLine, OrderStatus, ProductHistoryRow, ProductSale

__all__ = [
    'ClassifiedIdentifier',
    'Customer',
    'DiagnosticState',
    'FinancialMovement',
    'FinancialTotals',
    'IdentifierKind',
    'MovementDirection',
    'Order',
    'OrderDiagnostic',
    'OrderLine',
    'OrderStatus',
    'ProductHistoryRow',
    'ProductSale',
    'classify',
]
