import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from estoque.core.domain.services.movement_rules import MovementKind


class MovementDTO(BaseModel):
    produto_id: uuid.UUID
    tipo_movimentacao: MovementKind
    quantidade: int
    lote_id: uuid.UUID | None = None
    data_movimentacao: datetime | None = None
    origem_destino: str | None = Field(default=None, max_length=200)
    observacoes: str | None = None
