from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime

from clinica_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class LotEntity(EntityMixin):
    id: uuid.UUID
    medico_id: uuid.UUID
    produto_id: uuid.UUID
    data_validade: date
    quantidade_lote: int
    data_entrada: date
    numero_lote: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def vencido_em(self, referencia: date) -> bool:
        return self.data_validade < referencia
