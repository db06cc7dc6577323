import uuid
from dataclasses import dataclass

from clinica_core.core.domain.events.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class StockMovementRecordedEvent(DomainEvent):
    movimentacao_id: uuid.UUID
    medico_id: uuid.UUID
    produto_id: uuid.UUID
    tipo_movimentacao: str
    quantidade: int
    saldo: int


@dataclass(frozen=True, kw_only=True)
class LowStockReachedEvent(DomainEvent):
    medico_id: uuid.UUID
    produto_id: uuid.UUID
    saldo: int
    estoque_minimo: int
