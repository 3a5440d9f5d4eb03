"""
Unit tests for domain models built from store rows
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from consulta.domain.customer import Customer, FinancialMovement, MovementDirection
from consulta.domain.order import Order, OrderLine, OrderStatus


class TestOrder:

    def test_builds_from_row_and_serializes(self, sample_order_row):
        order = Order(**sample_order_row)
        data = order.to_dict()

        assert data["valor_total"] == 1234.5
        assert data["data_emissao"] == "2024-03-05"
        assert data["codigo_pedido"] == "PED001"

    def test_numeric_keys_are_coerced_to_text(self, sample_order_row):
        order = Order(**{**sample_order_row, "numero_pedido": 1001})
        assert order.numero_pedido == "1001"

    @pytest.mark.parametrize("status", ["cancelado", "CANCELADO", "C", " c "])
    def test_cancelled_by_status_code(self, sample_order_row, status):
        order = Order(**{**sample_order_row, "status": status})
        assert order.parsed_status is OrderStatus.CANCELLED
        assert order.is_cancelled

    def test_cancelled_by_cancellation_date(self, sample_order_row):
        order = Order(**{**sample_order_row, "data_cancelamento": datetime(2024, 4, 1, 9, 0)})
        assert order.parsed_status is OrderStatus.COMPLETED
        assert order.data_cancelamento == date(2024, 4, 1)
        assert order.is_cancelled

    def test_not_cancelled(self, sample_order_row):
        assert not Order(**sample_order_row).is_cancelled

    @pytest.mark.parametrize("raw,expected", [("S", True), ("sim", True), ("N", False), (1, True), (None, False)])
    def test_flags_accept_legacy_values(self, sample_order_row, raw, expected):
        order = Order(**{**sample_order_row, "faturado": raw})
        assert order.faturado is expected

    def test_reference_keys_skip_blank_and_duplicates(self, sample_order_row):
        assert Order(**sample_order_row).reference_keys == ["1001", "PED001"]
        assert Order(**{**sample_order_row, "numero_pedido": " "}).reference_keys == ["PED001"]
        assert Order(**{**sample_order_row, "codigo_pedido": "1001"}).reference_keys == ["1001"]

    def test_unparseable_total_becomes_none(self, sample_order_row):
        assert Order(**{**sample_order_row, "valor_total": "n/a"}).valor_total is None

    @pytest.mark.parametrize("raw,expected", [
        ("05/03/2024", date(2024, 3, 5)),
        ("2024-03-05 14:30:00", date(2024, 3, 5)),
        (datetime(2024, 3, 5, 14, 30), date(2024, 3, 5)),
        ("0000-00-00", None),
        ("", None),
    ])
    def test_stored_dates_are_coerced_or_dropped(self, sample_order_row, raw, expected):
        order = Order(**{**sample_order_row, "data_emissao": raw, "data_cancelamento": raw})

        assert order.data_emissao == expected
        assert order.data_cancelamento == expected

    @pytest.mark.parametrize("raw,expected", [("05/03/2024", date(2024, 3, 5)), ("0000-00-00", None)])
    def test_order_line_dates(self, raw, expected):
        line = OrderLine(id=1, pedido_ref="PED001", data_emissao=raw)
        assert line.data_emissao == expected


class TestFinancialMovement:

    @pytest.mark.parametrize("raw,expected", [
        ("entrada", MovementDirection.INFLOW),
        ("E", MovementDirection.INFLOW),
        ("Crédito", MovementDirection.INFLOW),
        ("saida", MovementDirection.OUTFLOW),
        ("Saída", MovementDirection.OUTFLOW),
        ("D", MovementDirection.OUTFLOW),
        ("estorno", None),
        (None, None),
    ])
    def test_direction_parsing(self, raw, expected):
        movement = FinancialMovement(id=1, tipo=raw, valor="10")
        assert movement.direction is expected

    def test_non_numeric_amount_becomes_none(self):
        assert FinancialMovement(id=1, tipo="entrada", valor="abc").valor is None
        assert FinancialMovement(id=1, tipo="entrada", valor="12.5").valor == Decimal("12.5")

    @pytest.mark.parametrize("raw,expected", [("05/03/2024", date(2024, 3, 5)), ("0000-00-00", None)])
    def test_movement_dates(self, raw, expected):
        assert FinancialMovement(id=1, tipo="entrada", data_movimento=raw).data_movimento == expected


def test_customer_from_row(sample_customer_row):
    customer = Customer(**sample_customer_row)
    assert customer.to_dict()["data_cadastro"] == "2020-01-15"


def test_customer_zero_registration_date(sample_customer_row):
    assert Customer(**{**sample_customer_row, "data_cadastro": "0000-00-00"}).data_cadastro is None
