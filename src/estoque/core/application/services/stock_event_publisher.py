import structlog

from clinica_core.adapters.observability.metrics import STOCK_MOVEMENTS
from clinica_core.core.domain.events.events import DomainEvent
from estoque.core.domain.entities.movement_entity import LedgerPosting
from estoque.core.domain.events.stock_events import LowStockReachedEvent, StockMovementRecordedEvent

logger = structlog.get_logger(__name__)


def posting_events(posting: LedgerPosting | None) -> list[DomainEvent]:
    """Eventos de um lançamento; o command bus publica depois do commit."""
    if posting is None:
        return []
    mov = posting.movement
    events: list[DomainEvent] = [
        StockMovementRecordedEvent(
            movimentacao_id=mov.id,
            medico_id=mov.medico_id,
            produto_id=mov.produto_id,
            tipo_movimentacao=mov.tipo_movimentacao,
            quantidade=mov.quantidade,
            saldo=posting.saldo,
        )
    ]
    if posting.estoque_minimo > 0 and posting.saldo <= posting.estoque_minimo:
        events.append(
            LowStockReachedEvent(
                medico_id=mov.medico_id,
                produto_id=mov.produto_id,
                saldo=posting.saldo,
                estoque_minimo=posting.estoque_minimo,
            )
        )
    return events


def count_movement(event: StockMovementRecordedEvent) -> None:
    STOCK_MOVEMENTS.labels(event.tipo_movimentacao).inc()


def warn_low_stock(event: LowStockReachedEvent) -> None:
    logger.warning(
        "estoque.abaixo_do_minimo",
        medico_id=str(event.medico_id),
        produto_id=str(event.produto_id),
        saldo=event.saldo,
        estoque_minimo=event.estoque_minimo,
    )
