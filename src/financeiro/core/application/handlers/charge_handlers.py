from clinica_core.core.application.cqrs import CommandHandler, PagedResult, QueryHandler
from clinica_core.core.domain.exceptions import ResourceNotFoundError
from financeiro.core.application.commands.charge_commands import (
    CreateChargeCommand,
    DeleteChargeCommand,
    RegenerateChargeLinkCommand,
    UpdateChargeCommand,
)
from financeiro.core.application.queries.financeiro_queries import GetChargeQuery, ListChargesQuery
from financeiro.core.application.services.charge_service import ChargeService
from financeiro.core.domain.entities.charge_entity import ChargeEntity
from financeiro.core.domain.repositories.charge_repository import ChargeRepository


class CreateChargeHandler(CommandHandler[CreateChargeCommand]):
    def __init__(self, service: ChargeService):
        self.service = service

    def handle(self, cmd: CreateChargeCommand) -> ChargeEntity:
        return self.service.create(cmd.medico_id, cmd.payload)


class UpdateChargeHandler(CommandHandler[UpdateChargeCommand]):
    def __init__(self, service: ChargeService):
        self.service = service

    def handle(self, cmd: UpdateChargeCommand) -> ChargeEntity:
        return self.service.update(cmd.medico_id, cmd.id, cmd.payload)


class DeleteChargeHandler(CommandHandler[DeleteChargeCommand]):
    def __init__(self, service: ChargeService):
        self.service = service

    def handle(self, cmd: DeleteChargeCommand) -> None:
        self.service.delete(cmd.medico_id, cmd.id)


class RegenerateChargeLinkHandler(CommandHandler[RegenerateChargeLinkCommand]):
    def __init__(self, service: ChargeService):
        self.service = service

    def handle(self, cmd: RegenerateChargeLinkCommand) -> ChargeEntity:
        return self.service.regenerate(cmd.medico_id, cmd.id, cmd.payload.data_vencimento)


class ListChargesHandler(QueryHandler[ListChargesQuery, PagedResult[ChargeEntity]]):
    def __init__(self, repo: ChargeRepository):
        self.repo = repo

    def handle(self, q: ListChargesQuery) -> PagedResult[ChargeEntity]:
        return self.repo.list(filtros=q.filtros, page=q.page, page_size=q.page_size)


class GetChargeHandler(QueryHandler[GetChargeQuery, ChargeEntity]):
    def __init__(self, repo: ChargeRepository):
        self.repo = repo

    def handle(self, q: GetChargeQuery) -> ChargeEntity:
        charge = self.repo.find_by_id(q.filtros["id"], q.filtros["medico_id"])
        if charge is None:
            raise ResourceNotFoundError("Cobrança não encontrada")
        return charge
