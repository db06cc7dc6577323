from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from clinica_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class TransactionEntity(EntityMixin):
    id: uuid.UUID
    medico_id: uuid.UUID
    tipo_transacao: str
    descricao: str
    valor: Decimal
    data_transacao: date
    categoria: str | None = None
    meio_pagamento: str | None = None
    cobranca_id: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
