from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from clinica_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class ReconciliationEntity(EntityMixin):
    """Cobrança que ficou viva no provedor sem contrapartida local válida."""
    id: uuid.UUID
    kind: str
    medico_id: uuid.UUID
    local_reference: str
    external_id: str
    error: str = ""
    status: str = "PENDING"
    attempts: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ReconciliationKind(str, Enum):
    ORPHAN_PROVIDER_CHARGE = "ORPHAN_PROVIDER_CHARGE"
    STALE_PROVIDER_CHARGE = "STALE_PROVIDER_CHARGE"
