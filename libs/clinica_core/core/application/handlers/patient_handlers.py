import uuid
from dataclasses import replace

import structlog

from clinica_core.core.application.commands.patient_commands import (
    CreatePatientCommand,
    DeletePatientCommand,
    UpdatePatientCommand,
)
from clinica_core.core.application.cqrs import CommandHandler, PagedResult, QueryHandler
from clinica_core.core.application.queries.patient_queries import GetPatientQuery, ListPatientsQuery
from clinica_core.core.domain.entities.patient_entity import PatientEntity
from clinica_core.core.domain.exceptions import ResourceNotFoundError
from clinica_core.core.domain.repositories.patient_repository import PatientRepository

logger = structlog.get_logger(__name__)

_NOT_FOUND = "Paciente não encontrado"


class CreatePatientHandler(CommandHandler[CreatePatientCommand]):
    def __init__(self, repo: PatientRepository):
        self.repo = repo

    def handle(self, cmd: CreatePatientCommand) -> PatientEntity:
        entity = PatientEntity(
            id=uuid.uuid4(),
            medico_id=cmd.medico_id,
            **cmd.payload.model_dump(),
        )
        saved = self.repo.save(entity)
        logger.info("paciente.criado", paciente_id=str(saved.id), medico_id=str(cmd.medico_id))
        return saved


class UpdatePatientHandler(CommandHandler[UpdatePatientCommand]):
    def __init__(self, repo: PatientRepository):
        self.repo = repo

    def handle(self, cmd: UpdatePatientCommand) -> PatientEntity:
        current = self.repo.find_by_id(cmd.id, cmd.medico_id)
        if current is None:
            raise ResourceNotFoundError(_NOT_FOUND)

        changes = cmd.payload.model_dump(exclude_unset=True)
        if changes.get("nome_completo") is None:
            changes.pop("nome_completo", None)
        if changes.get("status_paciente") is None:
            changes.pop("status_paciente", None)
        return self.repo.save(replace(current, **changes))


class DeletePatientHandler(CommandHandler[DeletePatientCommand]):
    def __init__(self, repo: PatientRepository):
        self.repo = repo

    def handle(self, cmd: DeletePatientCommand) -> None:
        if not self.repo.delete(cmd.id, cmd.medico_id):
            raise ResourceNotFoundError(_NOT_FOUND)
        logger.info("paciente.removido", paciente_id=str(cmd.id), medico_id=str(cmd.medico_id))


class ListPatientsHandler(QueryHandler[ListPatientsQuery, PagedResult[PatientEntity]]):
    def __init__(self, repo: PatientRepository):
        self.repo = repo

    def handle(self, q: ListPatientsQuery) -> PagedResult[PatientEntity]:
        return self.repo.list(filtros=q.filtros, page=q.page, page_size=q.page_size)


class GetPatientHandler(QueryHandler[GetPatientQuery, PatientEntity]):
    def __init__(self, repo: PatientRepository):
        self.repo = repo

    def handle(self, q: GetPatientQuery) -> PatientEntity:
        patient = self.repo.find_by_id(q.filtros["id"], q.filtros["medico_id"])
        if patient is None:
            raise ResourceNotFoundError(_NOT_FOUND)
        return patient
