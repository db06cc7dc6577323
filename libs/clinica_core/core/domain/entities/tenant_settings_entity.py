import uuid
from dataclasses import dataclass
from datetime import datetime

from clinica_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class TenantSettingsEntity(EntityMixin):
    medico_id: uuid.UUID
    asaas_pix_key: str | None = None
    asaas_conectado: bool = False
    updated_at: datetime | None = None
