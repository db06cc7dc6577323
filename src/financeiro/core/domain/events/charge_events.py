import uuid
from dataclasses import dataclass

from clinica_core.core.domain.events.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class ChargeCreatedEvent(DomainEvent):
    charge_id: uuid.UUID
    medico_id: uuid.UUID
    asaas_charge_id: str
    metodo_pagamento: str


@dataclass(frozen=True, kw_only=True)
class ChargeStatusChangedEvent(DomainEvent):
    charge_id: uuid.UUID
    medico_id: uuid.UUID
    old_status: str
    new_status: str
    provider_event: str
