from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime

from clinica_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class PatientEntity(EntityMixin):
    id: uuid.UUID
    medico_id: uuid.UUID
    nome_completo: str
    cpf: str | None = None
    email_paciente: str | None = None
    telefone_principal: str | None = None
    data_nascimento: date | None = None
    status_paciente: str = "Paciente Ativo"
    asaas_customer_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def masked_cpf(self) -> str | None:
        if not self.cpf or len(self.cpf) < 3:  # noqa: PLR2004
            return None
        return f"***.***.***-{self.cpf[-2:]}"
