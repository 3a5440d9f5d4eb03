"""
Order Diagnostic Models

Response schema of the order diagnostic. The same shape is used for a
found order, a missing order and a store failure, so the UI only ever
handles one schema.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class DiagnosticState(str, Enum):
    NOT_FOUND = "nao_encontrado"
    HAS_ITEMS = "com_itens"
    NO_ITEMS = "sem_itens"


class DiagnosticOrder(BaseModel):
    """Order summary with display-formatted money and dates"""
    encontrado: bool = False
    chave_utilizada: Optional[str] = Field(None, description="Key strategy that matched")
    numero_pedido: Optional[str] = None
    codigo_pedido: Optional[str] = None
    cliente: Optional[str] = None
    cnpj: Optional[str] = None
    status: Optional[str] = None
    valor_total: Optional[str] = None
    data_emissao: Optional[str] = None
    data_faturamento: Optional[str] = None
    data_cancelamento: Optional[str] = None
    motivo_cancelamento: Optional[str] = None


class DiagnosticFlags(BaseModel):
    faturado: bool = False
    nota_cancelada: bool = False
    pedido_cancelado: bool = False


class DiagnosticLine(BaseModel):
    sequencia: Optional[int] = None
    codigo_produto: Optional[str] = None
    descricao_produto: Optional[str] = None
    quantidade: Optional[str] = None
    preco_unitario: str = "0,00"
    valor_total: str = "0,00"


class DiagnosticItems(BaseModel):
    total: int = 0
    dados: List[DiagnosticLine] = Field(default_factory=list)


class SimilarOrder(BaseModel):
    """Near-miss candidate from the candidate search"""
    numero_pedido: Optional[str] = None
    codigo_pedido: Optional[str] = None
    cliente: Optional[str] = None
    data_emissao: Optional[str] = None
    valor_total: str = "0,00"
    total_itens: int = 0


class OrderDiagnostic(BaseModel):
    estado: DiagnosticState = DiagnosticState.NOT_FOUND
    pedido_encontrado: bool = False
    tem_itens: bool = False
    pedido: DiagnosticOrder = Field(default_factory=DiagnosticOrder)
    status: DiagnosticFlags = Field(default_factory=DiagnosticFlags)
    itens: DiagnosticItems = Field(default_factory=DiagnosticItems)
    pedidos_similares: List[SimilarOrder] = Field(default_factory=list)
    sugestoes: List[str] = Field(default_factory=list)
    erro: Optional[str] = None

    def to_dict(self) -> dict:
        return self.model_dump(mode="json")
