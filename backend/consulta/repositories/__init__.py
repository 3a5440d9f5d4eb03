"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.

Author: TM3
Date: 2025-10-17
"""
from consulta.repositories.customer_repository import CustomerRepository
from consulta.repositories.lookup_repository import LookupRepository
from consulta.repositories.order_repository import OrderRepository

__all__ = [
    'CustomerRepository',
    'LookupRepository',
    'OrderRepository'
]
