from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from clinica_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class ChargeEntity(EntityMixin):
    id: uuid.UUID
    medico_id: uuid.UUID
    paciente_id: uuid.UUID
    descricao: str
    valor: Decimal
    data_vencimento: date
    metodo_pagamento: str
    status_cobranca: str = "PENDENTE"
    asaas_charge_id: str | None = None
    link_pagamento: str | None = None
    pix_copia_cola: str | None = None
    qr_code_pix_base64: str | None = None
    data_pagamento: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    # anotado pelo repositório (paciente__nome_completo)
    paciente_nome: str | None = None
