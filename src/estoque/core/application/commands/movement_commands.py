from dataclasses import dataclass

from clinica_core.core.application.cqrs import CommandDTO
from estoque.core.application.dtos.movement_dto import MovementDTO


@dataclass(frozen=True)
class RecordMovementCommand(CommandDTO):
    medico_id: str
    payload: MovementDTO
