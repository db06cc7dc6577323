from dataclasses import dataclass

from clinica_core.core.application.cqrs import CommandDTO
from clinica_core.core.application.dtos.patient_dto import PatientDTO, PatientUpdateDTO


@dataclass(frozen=True)
class CreatePatientCommand(CommandDTO):
    medico_id: str
    payload: PatientDTO

@dataclass(frozen=True)
class UpdatePatientCommand(CommandDTO):
    id: str
    medico_id: str
    payload: PatientUpdateDTO

@dataclass(frozen=True)
class DeletePatientCommand(CommandDTO):
    id: str
    medico_id: str
