from dataclasses import dataclass

from clinica_core.core.application.cqrs import CommandDTO
from estoque.core.application.dtos.lot_dto import LotDTO, LotUpdateDTO


@dataclass(frozen=True)
class CreateLotCommand(CommandDTO):
    medico_id: str
    payload: LotDTO

@dataclass(frozen=True)
class UpdateLotCommand(CommandDTO):
    id: str
    medico_id: str
    payload: LotUpdateDTO

@dataclass(frozen=True)
class DeleteLotCommand(CommandDTO):
    id: str
    medico_id: str
