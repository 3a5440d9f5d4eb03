"""
Generic Lookup Repository

Substring search over any allow-listed table/column pair.
"""
from typing import Any, Dict, List

from consulta.core.database import StoreSession
from consulta.repositories.query_builder import Contains, FilterSpec, OrderBy, Table, validate_column


def build_lookup(table_name: str, column_name: str, value: str) -> FilterSpec:
    """
    Validate names and build the lookup filter (no store access)

    Raises:
        InvalidFilterError: table or column outside the allow-list
    """
    table = Table.from_name(table_name)
    column = validate_column(table, column_name)
    return FilterSpec(
        table=table,
        predicates=[Contains(column, value)],
        order_by=[OrderBy("id")],
    )


class LookupRepository:
    """Read-only `SELECT ... WHERE column ILIKE %value%` over allow-listed names"""

    def __init__(self, session: StoreSession):
        self.session = session

    def search(self, spec: FilterSpec) -> List[Dict[str, Any]]:
        query, params = spec.compile()
        return self.session.fetch_all(query, params)
