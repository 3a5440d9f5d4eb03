"""
API tests for the /api/v1/clientes endpoints

The CustomerService dependency is overridden with a Mock, so these tests
only cover parameter handling, status codes and the response envelope.
"""
from decimal import Decimal
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from consulta.api.dependencies import get_customer_service
from consulta.core.exceptions import StoreUnavailableError
from consulta.domain.order import ProductHistoryRow
from consulta.main import app
from consulta.repositories.order_repository import ProductSource
from consulta.services.customer_service import CustomerService


@pytest.fixture
def customer_service():
    return Mock(spec=CustomerService)


@pytest.fixture
def client(customer_service):
    app.dependency_overrides[get_customer_service] = lambda: customer_service
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestResolver:

    def test_resolve(self, client, customer_service):
        customer_service.resolve.return_value = {
            "kind": "structured_id", "canonical": "12345678000190", "customer": {"id": 1}, "orders": [],
        }

        response = client.get("/api/v1/clientes/resolver", params={"identificador": " 12.345.678/0001-90 "})

        assert response.status_code == 200
        assert response.json()["customer"] == {"id": 1}
        customer_service.resolve.assert_called_once_with("12.345.678/0001-90")

    @pytest.mark.parametrize("params", [{}, {"identificador": ""}, {"identificador": "   "}])
    def test_missing_identifier(self, client, customer_service, params):
        response = client.get("/api/v1/clientes/resolver", params=params)

        assert response.status_code == 400
        assert response.json() == {"error": "O parâmetro 'identificador' é obrigatório"}
        customer_service.resolve.assert_not_called()

    def test_store_failure(self, client, customer_service):
        customer_service.resolve.side_effect = StoreUnavailableError("could not connect to server")

        response = client.get("/api/v1/clientes/resolver", params={"identificador": "acme"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Erro ao consultar o banco de dados",
            "message": "could not connect to server",
        }


class TestFinancial:

    def test_financial_history(self, client, customer_service):
        customer_service.financial_history.return_value = {
            "movements": [],
            "totals": {"total_inflow": 0.0, "total_outflow": 0.0, "net_balance": 0.0},
        }

        response = client.get("/api/v1/clientes/financeiro", params={"identificador": "acme"})

        assert response.status_code == 200
        assert response.json()["totals"]["net_balance"] == 0.0

    def test_missing_identifier(self, client, customer_service):
        response = client.get("/api/v1/clientes/financeiro")

        assert response.status_code == 400
        customer_service.financial_history.assert_not_called()


class TestProducts:

    def test_product_history(self, client, customer_service):
        customer_service.product_history.return_value = [
            ProductHistoryRow(codigo_produto="P-01", descricao_produto="Parafuso",
                              total_pedidos=2, quantidade_total=Decimal("7")),
        ]

        response = client.get("/api/v1/clientes/produtos", params={"identificador": "acme"})

        assert response.status_code == 200
        assert response.json() == [{
            "codigo_produto": "P-01", "descricao_produto": "Parafuso", "total_pedidos": 2,
            "quantidade_total": 7.0, "primeira_compra": None, "ultima_compra": None,
        }]
        customer_service.product_history.assert_called_once_with("acme", ProductSource.ORDER_LINES)

    def test_product_sales_source(self, client, customer_service):
        customer_service.product_history.return_value = []

        client.get("/api/v1/clientes/produtos", params={"identificador": "acme", "fonte": "VENDAS"})

        customer_service.product_history.assert_called_once_with("acme", ProductSource.PRODUCT_SALES)

    def test_unknown_source(self, client, customer_service):
        response = client.get("/api/v1/clientes/produtos", params={"identificador": "acme", "fonte": "notas"})

        assert response.status_code == 400
        assert "notas" in response.json()["error"]
        customer_service.product_history.assert_not_called()
