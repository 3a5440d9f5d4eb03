"""
Customer Repository - Data Access Layer for customers and financial movements

Author: TM3
Date: 2025-10-17
"""
from typing import List

from consulta.core.database import StoreSession
from consulta.domain.customer import Customer, FinancialMovement
from consulta.repositories.query_builder import FilterSpec, OrderBy, Predicate, Table


class CustomerRepository:
    """
    Repository for `clientes` and `movimentacoes_financeiras`

    Callers pass the filter predicate; this class only knows tables,
    projections and ordering.
    """

    def __init__(self, session: StoreSession):
        self.session = session

    def find(self, predicate: Predicate) -> List[Customer]:
        """
        Find customers matching predicate, in storage order

        Returns:
            Every matching customer (possibly several with the same CNPJ)
        """
        query, params = FilterSpec(
            table=Table.CLIENTES,
            predicates=[predicate],
            order_by=[OrderBy("id")],
        ).compile()

        rows = self.session.fetch_all(query, params)
        return [Customer(**row) for row in rows]

    def find_movements(self, predicate: Predicate) -> List[FinancialMovement]:
        """Financial movements matching predicate, most recent first"""
        query, params = FilterSpec(
            table=Table.MOVIMENTACOES_FINANCEIRAS,
            predicates=[predicate],
            order_by=[OrderBy("data_movimento", descending=True), OrderBy("id")],
        ).compile()

        rows = self.session.fetch_all(query, params)
        return [FinancialMovement(**row) for row in rows]
