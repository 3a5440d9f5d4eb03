"""
Order Diagnostic Service

Explains why an order reference does (or does not) lead to a usable order:

1. look the order up through ORDER_KEY_STRATEGIES, first hit wins
2. not found -> NOT_FOUND with a single suggestion
3. found -> fetch its line items
4. always search near-miss candidates (duplicated keys are common)
5. derive billed / invoice cancelled / order cancelled flags
6. compose suggestions

Store failures never escape: they produce a NOT_FOUND-shaped diagnostic
with `erro` set, so the UI handles a single schema.

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import Any, Callable, ContextManager, Dict, List, Optional, Sequence, Tuple

from consulta.core.config import settings
from consulta.core.database import StoreSession, store_session
from consulta.core.exceptions import ConsultaError
from consulta.domain.diagnostic import (
    DiagnosticFlags,
    DiagnosticItems,
    DiagnosticLine,
    DiagnosticOrder,
    DiagnosticState,
    OrderDiagnostic,
    SimilarOrder,
)
from consulta.domain.formatting import Ok, date_or_none, format_date, money_or_zero
from consulta.domain.identifier import format_tax_id, canonical_tax_id
from consulta.domain.order import Order, OrderLine
from consulta.repositories.order_repository import (
    ORDER_KEY_STRATEGIES,
    OrderRepository,
    ReferenceKeyStrategy,
)

logger = logging.getLogger(__name__)

SUGGESTION_NOT_FOUND = "Pedido não encontrado. Verifique se o número informado está correto."
SUGGESTION_NO_ITEMS = "Nenhum item encontrado para este pedido."
SUGGESTION_BILLED = "Pedido já faturado. Verifique a nota fiscal."
SUGGESTION_INVOICE_CANCELLED = "A nota fiscal deste pedido foi cancelada."
SUGGESTION_CANCELLED_ON = "Pedido cancelado em {data}."
SUGGESTION_CANCELLED = "Pedido cancelado."
SUGGESTION_CANCEL_REASON = "Motivo do cancelamento: {motivo}"
SUGGESTION_SIMILAR = "Existem pedidos semelhantes que podem ser o pedido procurado."
SUGGESTION_STORE_ERROR = "Não foi possível consultar o pedido. Tente novamente mais tarde."


def not_found_diagnostic() -> OrderDiagnostic:
    return OrderDiagnostic(
        estado=DiagnosticState.NOT_FOUND,
        sugestoes=[SUGGESTION_NOT_FOUND],
    )


def error_diagnostic(message: str) -> OrderDiagnostic:
    return OrderDiagnostic(
        estado=DiagnosticState.NOT_FOUND,
        sugestoes=[SUGGESTION_STORE_ERROR],
        erro=message,
    )


def build_flags(order: Order) -> DiagnosticFlags:
    return DiagnosticFlags(
        faturado=order.faturado,
        nota_cancelada=order.nota_cancelada,
        pedido_cancelado=order.is_cancelled,
    )


def build_suggestions(
    order: Order,
    item_count: int,
    flags: DiagnosticFlags,
    similar_count: int
) -> List[str]:
    """Remediation hints, in a fixed order"""
    suggestions = []

    if item_count == 0:
        suggestions.append(SUGGESTION_NO_ITEMS)
    if flags.faturado:
        suggestions.append(SUGGESTION_BILLED)
    if flags.nota_cancelada:
        suggestions.append(SUGGESTION_INVOICE_CANCELLED)
    if flags.pedido_cancelado:
        cancelled_on = format_date(order.data_cancelamento)
        if isinstance(cancelled_on, Ok):
            suggestions.append(SUGGESTION_CANCELLED_ON.format(data=cancelled_on.value))
        else:
            suggestions.append(SUGGESTION_CANCELLED)
        if order.motivo_cancelamento and order.motivo_cancelamento.strip():
            suggestions.append(SUGGESTION_CANCEL_REASON.format(motivo=order.motivo_cancelamento.strip()))
    if similar_count > 0:
        suggestions.append(SUGGESTION_SIMILAR)

    return suggestions


def summarize_order(order: Order, strategy: ReferenceKeyStrategy) -> DiagnosticOrder:
    return DiagnosticOrder(
        encontrado=True,
        chave_utilizada=strategy.name,
        numero_pedido=order.numero_pedido,
        codigo_pedido=order.codigo_pedido,
        cliente=order.nome_cliente,
        cnpj=format_tax_id(canonical_tax_id(order.cnpj_cliente)) if order.cnpj_cliente else None,
        status=order.status,
        valor_total=money_or_zero(order.valor_total),
        data_emissao=date_or_none(order.data_emissao),
        data_faturamento=date_or_none(order.data_faturamento),
        data_cancelamento=date_or_none(order.data_cancelamento),
        motivo_cancelamento=order.motivo_cancelamento,
    )


def summarize_line(line: OrderLine) -> DiagnosticLine:
    quantity = line.quantidade
    return DiagnosticLine(
        sequencia=line.sequencia,
        codigo_produto=line.codigo_produto,
        descricao_produto=line.descricao_produto,
        quantidade=format(quantity.normalize(), "f") if quantity is not None else None,
        preco_unitario=money_or_zero(line.preco_unitario),
        valor_total=money_or_zero(line.valor_total),
    )


def summarize_candidate(row: Dict[str, Any]) -> SimilarOrder:
    def as_text(value):
        return None if value is None else str(value)

    return SimilarOrder(
        numero_pedido=as_text(row.get("numero_pedido")),
        codigo_pedido=as_text(row.get("codigo_pedido")),
        cliente=row.get("nome_cliente"),
        data_emissao=date_or_none(row.get("data_emissao")),
        valor_total=money_or_zero(row.get("valor_total")),
        total_itens=int(row.get("total_itens") or 0),
    )


class OrderDiagnosticService:
    """
    Builds OrderDiagnostic responses

    Args:
        session_factory: context manager factory yielding a StoreSession
        candidate_limit: cap of the near-miss search
        strategies: ordered key strategies for the direct lookup
    """

    def __init__(
        self,
        session_factory: Callable[[], ContextManager[StoreSession]] = store_session,
        candidate_limit: Optional[int] = None,
        strategies: Sequence[ReferenceKeyStrategy] = ORDER_KEY_STRATEGIES
    ):
        self.session_factory = session_factory
        self.candidate_limit = candidate_limit or settings.DIAGNOSTIC_CANDIDATE_LIMIT
        self.strategies = strategies

    def diagnose(self, reference: str) -> OrderDiagnostic:
        reference = reference.strip()
        try:
            with self.session_factory() as session:
                return self._diagnose(OrderRepository(session), reference)
        except ConsultaError as e:
            logger.error(f"Diagnostic for order '{reference}' failed: {e.message}")
            return error_diagnostic(e.message)

    def find_order(
        self,
        repo: OrderRepository,
        reference: str
    ) -> Tuple[Optional[Order], Optional[ReferenceKeyStrategy]]:
        """Try each key strategy in order; the first one that finds a row wins"""
        for strategy in self.strategies:
            order = repo.find_by_reference(strategy, reference)
            if order is not None:
                logger.debug(f"Order '{reference}' found by {strategy.name}")
                return order, strategy
        return None, None

    def _diagnose(self, repo: OrderRepository, reference: str) -> OrderDiagnostic:
        order, strategy = self.find_order(repo, reference)
        if order is None:
            logger.info(f"Order '{reference}' not found")
            return not_found_diagnostic()

        lines = repo.find_lines(order.reference_keys)
        similar = repo.find_similar(reference, self.candidate_limit)
        flags = build_flags(order)

        state = DiagnosticState.HAS_ITEMS if lines else DiagnosticState.NO_ITEMS
        logger.info(f"Order '{reference}' diagnosed: {state.value}, {len(similar)} similar order(s)")

        return OrderDiagnostic(
            estado=state,
            pedido_encontrado=True,
            tem_itens=bool(lines),
            pedido=summarize_order(order, strategy),
            status=flags,
            itens=DiagnosticItems(
                total=len(lines),
                dados=[summarize_line(line) for line in lines],
            ),
            pedidos_similares=[summarize_candidate(row) for row in similar],
            sugestoes=build_suggestions(order, len(lines), flags, len(similar)),
        )
