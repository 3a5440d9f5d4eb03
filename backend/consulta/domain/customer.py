"""
Customer Domain Models

Customers and the financial movements recorded against them. Movements
reference customers only through the denormalized name/CNPJ columns.

Author: TM3
Date: 2025-10-17
"""
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator

from consulta.domain.base import RecordModel
from consulta.domain.formatting import to_date, to_decimal


class Customer(RecordModel):
    """
    Customer domain model - one row of `clientes`

    The CNPJ may be stored with or without punctuation and is not unique.
    """

    id: int = Field(..., description="Customer ID")
    razao_social: Optional[str] = Field(None, description="Legal name")
    nome_fantasia: Optional[str] = Field(None, description="Trade name")
    cnpj: Optional[str] = Field(None, description="Tax identifier as stored")

    # Address
    endereco: Optional[str] = Field(None, description="Street address")
    bairro: Optional[str] = Field(None, description="District")
    cidade: Optional[str] = Field(None, description="City")
    uf: Optional[str] = Field(None, description="State")
    cep: Optional[str] = Field(None, description="Postal code")

    # Contact
    telefone: Optional[str] = Field(None, description="Phone")
    email: Optional[str] = Field(None, description="Email")

    data_cadastro: Optional[date] = Field(None, description="Registration date")

    @field_validator("data_cadastro", mode="before")
    @classmethod
    def _coerce_date(cls, value):
        return to_date(value)


class MovementDirection(str, Enum):
    INFLOW = "entrada"
    OUTFLOW = "saida"

    @classmethod
    def parse(cls, raw: Any) -> Optional["MovementDirection"]:
        """Map the direction codes found in the store; None when unknown"""
        if raw is None:
            return None
        text = str(raw).strip().lower()
        if text in ("entrada", "e", "credito", "crédito", "c"):
            return cls.INFLOW
        if text in ("saida", "saída", "s", "debito", "débito", "d"):
            return cls.OUTFLOW
        return None


class FinancialMovement(RecordModel):
    """One row of `movimentacoes_financeiras`"""

    id: int = Field(..., description="Movement ID")
    nome_cliente: Optional[str] = Field(None, description="Customer name (denormalized)")
    cnpj_cliente: Optional[str] = Field(None, description="Customer CNPJ (denormalized)")
    tipo: Optional[str] = Field(None, description="Direction: entrada or saida")
    valor: Optional[Decimal] = Field(None, description="Amount; unparseable values become None")
    data_movimento: Optional[date] = Field(None, description="Movement date")
    forma_pagamento: Optional[str] = Field(None, description="Payment method")
    status: Optional[str] = Field(None, description="Movement status")

    @field_validator("valor", mode="before")
    @classmethod
    def _coerce_amount(cls, value):
        return to_decimal(value)

    @field_validator("data_movimento", mode="before")
    @classmethod
    def _coerce_date(cls, value):
        return to_date(value)

    @property
    def direction(self) -> Optional[MovementDirection]:
        return MovementDirection.parse(self.tipo)


class FinancialTotals(BaseModel):
    """Result of folding a customer's movements"""

    total_inflow: Decimal = Field(Decimal("0"), description="Sum of inflows")
    total_outflow: Decimal = Field(Decimal("0"), description="Sum of outflows")
    net_balance: Decimal = Field(Decimal("0"), description="total_inflow - total_outflow")

    def to_dict(self) -> dict:
        return {
            "total_inflow": float(self.total_inflow),
            "total_outflow": float(self.total_outflow),
            "net_balance": float(self.net_balance),
        }
