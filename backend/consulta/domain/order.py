"""
Order Domain Models

Orders, their line items, product sales and the per-product purchase
history derived from them.

An order may be known under two keys: a compact numeric one
(numero_pedido, e.g. "1001") and a prefixed one (codigo_pedido, e.g.
"PED001"). Line items and product sales point at either key through
pedido_ref; nothing enforces referential integrity.

Author: TM3
Date: 2025-10-17
"""
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import Field, field_validator

from consulta.domain.base import RecordModel
from consulta.domain.formatting import to_date, to_decimal


class OrderStatus(str, Enum):
    IN_PROGRESS = "em_andamento"
    COMPLETED = "concluido"
    CANCELLED = "cancelado"

    @classmethod
    def parse(cls, raw: Any) -> Optional["OrderStatus"]:
        """Accept current values and the legacy one-letter codes (A, F, C)"""
        if raw is None:
            return None
        text = str(raw).strip().lower()
        for status in cls:
            if text == status.value:
                return status
        return LEGACY_STATUS_CODES.get(text)


LEGACY_STATUS_CODES = {
    "a": OrderStatus.IN_PROGRESS,
    "aberto": OrderStatus.IN_PROGRESS,
    "f": OrderStatus.COMPLETED,
    "finalizado": OrderStatus.COMPLETED,
    "c": OrderStatus.CANCELLED,
    "cancelada": OrderStatus.CANCELLED,
}


class Order(RecordModel):
    """
    Order domain model - one row of `pedidos`

    Fields:
        numero_pedido: compact numeric key
        codigo_pedido: prefixed key (PED001)
        nome_cliente / cnpj_cliente: denormalized customer data
        faturado: billing flag
        nota_cancelada: invoice cancellation flag
        data_cancelamento / motivo_cancelamento: order cancellation info
    """

    id: int = Field(..., description="Internal order ID")
    numero_pedido: Optional[str] = Field(None, description="Compact numeric key")
    codigo_pedido: Optional[str] = Field(None, description="Prefixed key")

    nome_cliente: Optional[str] = Field(None, description="Customer name (denormalized)")
    cnpj_cliente: Optional[str] = Field(None, description="Customer CNPJ (denormalized)")

    valor_total: Optional[Decimal] = Field(None, description="Order total")
    valor_desconto: Optional[Decimal] = Field(None, description="Discount amount")
    quantidade_itens: Optional[int] = Field(None, description="Item count recorded on the order")

    status: Optional[str] = Field(None, description="Lifecycle status as stored")
    faturado: bool = Field(False, description="Billing flag")
    nota_cancelada: bool = Field(False, description="Invoice cancelled flag")

    data_emissao: Optional[date] = Field(None, description="Emission date")
    data_faturamento: Optional[date] = Field(None, description="Billing date")
    data_cancelamento: Optional[date] = Field(None, description="Cancellation date")
    motivo_cancelamento: Optional[str] = Field(None, description="Cancellation reason")

    @field_validator("valor_total", "valor_desconto", mode="before")
    @classmethod
    def _coerce_amount(cls, value):
        return to_decimal(value)

    @field_validator("faturado", "nota_cancelada", mode="before")
    @classmethod
    def _coerce_flag(cls, value):
        if isinstance(value, str):
            return value.strip().lower() in ("1", "s", "sim", "true", "t", "y")
        return bool(value)

    @field_validator("data_emissao", "data_faturamento", "data_cancelamento", mode="before")
    @classmethod
    def _coerce_date(cls, value):
        return to_date(value)

    @property
    def parsed_status(self) -> Optional[OrderStatus]:
        return OrderStatus.parse(self.status)

    @property
    def is_cancelled(self) -> bool:
        """Cancelled by status code OR by having a cancellation date"""
        return self.parsed_status is OrderStatus.CANCELLED or self.data_cancelamento is not None

    @property
    def reference_keys(self) -> List[str]:
        """Non-blank keys this order is known under, numeric key first"""
        keys = []
        for key in (self.numero_pedido, self.codigo_pedido):
            if key is not None and key.strip() and key.strip() not in keys:
                keys.append(key.strip())
        return keys


class OrderLine(RecordModel):
    """One row of `itens_pedido`"""

    id: int = Field(..., description="Line ID")
    pedido_ref: str = Field(..., description="Order key this line points at")
    sequencia: Optional[int] = Field(None, description="Sequence number inside the order")
    codigo_produto: Optional[str] = Field(None, description="Product code")
    descricao_produto: Optional[str] = Field(None, description="Product description")
    quantidade: Optional[Decimal] = Field(None, description="Quantity")
    preco_unitario: Optional[Decimal] = Field(None, description="Unit price")
    valor_total: Optional[Decimal] = Field(None, description="Line total")

    # from JOIN with pedidos (product history queries)
    pedido_id: Optional[int] = Field(None, description="Parent order ID")
    data_emissao: Optional[date] = Field(None, description="Emission date of the parent order")

    @field_validator("quantidade", "preco_unitario", "valor_total", mode="before")
    @classmethod
    def _coerce_amount(cls, value):
        return to_decimal(value)

    @field_validator("data_emissao", mode="before")
    @classmethod
    def _coerce_date(cls, value):
        return to_date(value)


class ProductSale(RecordModel):
    """One row of `vendas_produtos`"""

    id: int = Field(..., description="Sale ID")
    pedido_ref: str = Field(..., description="Order key this sale points at")
    codigo_produto: Optional[str] = Field(None, description="Product code")
    descricao_produto: Optional[str] = Field(None, description="Product description")
    quantidade: Optional[Decimal] = Field(None, description="Quantity")

    # from JOIN with pedidos
    pedido_id: Optional[int] = Field(None, description="Parent order ID")
    data_emissao: Optional[date] = Field(None, description="Emission date of the parent order")

    @field_validator("quantidade", mode="before")
    @classmethod
    def _coerce_amount(cls, value):
        return to_decimal(value)

    @field_validator("data_emissao", mode="before")
    @classmethod
    def _coerce_date(cls, value):
        return to_date(value)


class ProductHistoryRow(RecordModel):
    """Purchase history of one (code, description) pair"""

    codigo_produto: Optional[str] = Field(None, description="Product code")
    descricao_produto: Optional[str] = Field(None, description="Product description")
    total_pedidos: int = Field(0, description="Distinct orders containing the product")
    quantidade_total: Decimal = Field(Decimal("0"), description="Summed quantity")
    primeira_compra: Optional[date] = Field(None, description="First purchase (min order date)")
    ultima_compra: Optional[date] = Field(None, description="Last purchase (max order date)")
