from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from clinica_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class MovementEntity(EntityMixin):
    """Linha imutável do livro-razão de estoque."""
    id: uuid.UUID
    medico_id: uuid.UUID
    produto_id: uuid.UUID
    tipo_movimentacao: str
    quantidade: int
    data_movimentacao: datetime
    lote_id: uuid.UUID | None = None
    origem_destino: str | None = None
    observacoes: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class LedgerPosting:
    """Resultado de um lançamento: a movimentação gravada e o saldo resultante do produto."""
    movement: MovementEntity
    saldo: int
    estoque_minimo: int
