"""
Query Builder - typed filters compiled to parameterized SQL

Filters are described with small predicate objects instead of string
concatenation. Table and column names come only from the allow-list below
(anything else raises InvalidFilterError); every value is bound as a %s
parameter, never interpolated into the query text.

Example:
    spec = FilterSpec(
        table=Table.PEDIDOS,
        predicates=[Contains("nome_cliente", "acme")],
        order_by=[OrderBy("data_emissao", descending=True)],
    )
    query, params = spec.compile()
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from consulta.core.exceptions import InvalidFilterError


class Table(str, Enum):
    CLIENTES = "clientes"
    PEDIDOS = "pedidos"
    ITENS_PEDIDO = "itens_pedido"
    MOVIMENTACOES_FINANCEIRAS = "movimentacoes_financeiras"
    VENDAS_PRODUTOS = "vendas_produtos"

    @classmethod
    def from_name(cls, name: str) -> "Table":
        try:
            return cls((name or "").strip().lower())
        except ValueError:
            raise InvalidFilterError(f"Tabela não permitida: '{name}'")


TABLE_COLUMNS: Dict[Table, Tuple[str, ...]] = {
    Table.CLIENTES: (
        "id", "razao_social", "nome_fantasia", "cnpj", "endereco", "bairro",
        "cidade", "uf", "cep", "telefone", "email", "data_cadastro",
    ),
    Table.PEDIDOS: (
        "id", "numero_pedido", "codigo_pedido", "nome_cliente", "cnpj_cliente",
        "valor_total", "valor_desconto", "quantidade_itens", "status",
        "faturado", "nota_cancelada", "data_emissao", "data_faturamento",
        "data_cancelamento", "motivo_cancelamento",
    ),
    Table.ITENS_PEDIDO: (
        "id", "pedido_ref", "sequencia", "codigo_produto", "descricao_produto",
        "quantidade", "preco_unitario", "valor_total",
    ),
    Table.MOVIMENTACOES_FINANCEIRAS: (
        "id", "nome_cliente", "cnpj_cliente", "tipo", "valor", "data_movimento",
        "forma_pagamento", "status",
    ),
    Table.VENDAS_PRODUTOS: (
        "id", "pedido_ref", "codigo_produto", "descricao_produto", "quantidade",
    ),
}


def validate_column(table: Table, column: str) -> str:
    """Return the column name if it belongs to table, else raise InvalidFilterError"""
    name = (column or "").strip().lower()
    if name not in TABLE_COLUMNS[table]:
        raise InvalidFilterError(f"Coluna não permitida para {table.value}: '{column}'")
    return name


def escape_like(text: str) -> str:
    """Escape LIKE wildcards so user input matches literally (backslash is the default escape)"""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _qualify(column: str, alias: Optional[str]) -> str:
    return f"{alias}.{column}" if alias else column


class Predicate:
    """Base class: compile() returns (sql_fragment, params)"""

    def columns(self) -> List[str]:
        raise NotImplementedError

    def compile(self, alias: Optional[str] = None) -> Tuple[str, List[Any]]:
        raise NotImplementedError


@dataclass(frozen=True)
class Equals(Predicate):
    column: str
    value: Any

    def columns(self):
        return [self.column]

    def compile(self, alias=None):
        return f"{_qualify(self.column, alias)} = %s", [self.value]


@dataclass(frozen=True)
class EqualsAny(Predicate):
    column: str
    values: Sequence[Any]

    def columns(self):
        return [self.column]

    def compile(self, alias=None):
        return f"{_qualify(self.column, alias)} = ANY(%s)", [list(self.values)]


@dataclass(frozen=True)
class DigitsEqual(Predicate):
    """Compare the column's digits-only form with an already canonical value"""
    column: str
    digits: str

    def columns(self):
        return [self.column]

    def compile(self, alias=None):
        column = _qualify(self.column, alias)
        return f"regexp_replace({column}, '[^0-9]', '', 'g') = %s", [self.digits]


@dataclass(frozen=True)
class Contains(Predicate):
    """Case-insensitive substring match"""
    column: str
    text: str

    def columns(self):
        return [self.column]

    def compile(self, alias=None):
        column = _qualify(self.column, alias)
        return f"CAST({column} AS TEXT) ILIKE %s", [f"%{escape_like(self.text)}%"]


@dataclass(frozen=True)
class AnyOf(Predicate):
    """OR of the given predicates"""
    predicates: Tuple[Predicate, ...]

    def columns(self):
        return [c for p in self.predicates for c in p.columns()]

    def compile(self, alias=None):
        fragments = []
        params: List[Any] = []
        for predicate in self.predicates:
            fragment, fragment_params = predicate.compile(alias)
            fragments.append(fragment)
            params.extend(fragment_params)
        return "(" + " OR ".join(fragments) + ")", params


@dataclass(frozen=True)
class OrderBy:
    column: str
    descending: bool = False

    def compile(self, alias=None) -> str:
        direction = "DESC NULLS LAST" if self.descending else "ASC"
        return f"{_qualify(self.column, alias)} {direction}"


def compile_where(predicates: Sequence[Predicate], alias: Optional[str] = None) -> Tuple[str, List[Any]]:
    """AND the predicates together; "1=1" when there are none"""
    fragments = []
    params: List[Any] = []
    for predicate in predicates:
        fragment, fragment_params = predicate.compile(alias)
        fragments.append(fragment)
        params.extend(fragment_params)
    return (" AND ".join(fragments) if fragments else "1=1"), params


@dataclass
class FilterSpec:
    """
    SELECT over one allow-listed table

    Attributes:
        table: Table to read
        predicates: ANDed filter predicates
        order_by: sort keys
        limit: row cap (None = unbounded)
    """
    table: Table
    predicates: List[Predicate] = field(default_factory=list)
    order_by: List[OrderBy] = field(default_factory=list)
    limit: Optional[int] = None

    def __post_init__(self):
        for predicate in self.predicates:
            for column in predicate.columns():
                validate_column(self.table, column)
        for key in self.order_by:
            validate_column(self.table, key.column)
        if self.limit is not None and self.limit < 1:
            raise InvalidFilterError("limit must be positive")

    def compile(self) -> Tuple[str, List[Any]]:
        projection = ", ".join(TABLE_COLUMNS[self.table])
        where_clause, params = compile_where(self.predicates)

        query = f"SELECT {projection} FROM {self.table.value} WHERE {where_clause}"
        if self.order_by:
            query += " ORDER BY " + ", ".join(key.compile() for key in self.order_by)
        if self.limit is not None:
            query += " LIMIT %s"
            params = params + [self.limit]
        return query, params
