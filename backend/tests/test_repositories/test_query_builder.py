"""
Unit tests for the query builder

Checks that filters compile to parameterized SQL and that only
allow-listed names reach the query text.
"""
from datetime import date

import pytest

from consulta.core.exceptions import InvalidFilterError
from consulta.repositories.query_builder import (
    AnyOf,
    Contains,
    DigitsEqual,
    Equals,
    EqualsAny,
    FilterSpec,
    OrderBy,
    Table,
    compile_where,
    escape_like,
    validate_column,
)


class TestPredicates:

    def test_equals(self):
        assert Equals("numero_pedido", "1001").compile() == ("numero_pedido = %s", ["1001"])

    def test_equals_with_alias(self):
        assert Equals("numero_pedido", "1001").compile("p") == ("p.numero_pedido = %s", ["1001"])

    def test_equals_any_binds_a_list(self):
        fragment, params = EqualsAny("pedido_ref", ("1001", "PED001")).compile()
        assert fragment == "pedido_ref = ANY(%s)"
        assert params == [["1001", "PED001"]]

    def test_digits_equal_normalizes_the_column(self):
        fragment, params = DigitsEqual("cnpj", "12345678000190").compile()
        assert fragment == "regexp_replace(cnpj, '[^0-9]', '', 'g') = %s"
        assert params == ["12345678000190"]

    def test_contains_wraps_value_in_wildcards(self):
        fragment, params = Contains("nome_cliente", "Acme").compile()
        assert fragment == "CAST(nome_cliente AS TEXT) ILIKE %s"
        assert params == ["%Acme%"]

    def test_contains_escapes_user_wildcards(self):
        _, params = Contains("nome_cliente", "50%_off").compile()
        assert params == ["%50\\%\\_off%"]

    def test_any_of_joins_with_or(self):
        fragment, params = AnyOf((Contains("nome_cliente", "a"), Contains("cnpj_cliente", "a"))).compile("p")
        assert fragment == "(CAST(p.nome_cliente AS TEXT) ILIKE %s OR CAST(p.cnpj_cliente AS TEXT) ILIKE %s)"
        assert params == ["%a%", "%a%"]

    def test_values_never_reach_the_query_text(self):
        fragment, _ = Equals("nome_cliente", "x'; DROP TABLE pedidos; --").compile()
        assert "DROP" not in fragment


def test_escape_like():
    assert escape_like("a\\b") == "a\\\\b"
    assert escape_like("plain") == "plain"


def test_compile_where_without_predicates():
    assert compile_where([]) == ("1=1", [])


class TestFilterSpec:

    def test_compiles_select_with_order_and_limit(self):
        query, params = FilterSpec(
            table=Table.PEDIDOS,
            predicates=[Contains("nome_cliente", "acme"), Equals("data_emissao", date(2024, 1, 2))],
            order_by=[OrderBy("data_emissao", descending=True), OrderBy("id")],
            limit=5,
        ).compile()

        assert query.startswith("SELECT id, numero_pedido, codigo_pedido")
        assert "FROM pedidos WHERE CAST(nome_cliente AS TEXT) ILIKE %s AND data_emissao = %s" in query
        assert query.endswith("ORDER BY data_emissao DESC NULLS LAST, id ASC LIMIT %s")
        assert params == ["%acme%", date(2024, 1, 2), 5]

    def test_rejects_unknown_predicate_column(self):
        with pytest.raises(InvalidFilterError):
            FilterSpec(table=Table.CLIENTES, predicates=[Equals("senha", "x")])

    def test_rejects_unknown_order_column(self):
        with pytest.raises(InvalidFilterError):
            FilterSpec(table=Table.PEDIDOS, order_by=[OrderBy("1; DROP TABLE pedidos")])

    def test_rejects_non_positive_limit(self):
        with pytest.raises(InvalidFilterError):
            FilterSpec(table=Table.PEDIDOS, limit=0)


class TestAllowList:

    def test_table_from_name(self):
        assert Table.from_name(" Pedidos ") is Table.PEDIDOS

    @pytest.mark.parametrize("name", ["usuarios", "pedidos; --", "", None])
    def test_unknown_table_is_rejected(self, name):
        with pytest.raises(InvalidFilterError):
            Table.from_name(name)

    def test_validate_column(self):
        assert validate_column(Table.CLIENTES, "CNPJ") == "cnpj"
        with pytest.raises(InvalidFilterError):
            validate_column(Table.CLIENTES, "valor_total")
