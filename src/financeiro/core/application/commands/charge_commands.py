from dataclasses import dataclass

from clinica_core.core.application.cqrs import CommandDTO
from financeiro.core.application.dtos.charge_dto import ChargeDTO, ChargeUpdateDTO, RegenerateLinkDTO


@dataclass(frozen=True)
class CreateChargeCommand(CommandDTO):
    medico_id: str
    payload: ChargeDTO

@dataclass(frozen=True)
class UpdateChargeCommand(CommandDTO):
    id: str
    medico_id: str
    payload: ChargeUpdateDTO

@dataclass(frozen=True)
class DeleteChargeCommand(CommandDTO):
    id: str
    medico_id: str

@dataclass(frozen=True)
class RegenerateChargeLinkCommand(CommandDTO):
    id: str
    medico_id: str
    payload: RegenerateLinkDTO
