import uuid
from dataclasses import replace

from clinica_core.core.application.cqrs import CommandHandler, PagedResult, QueryHandler
from clinica_core.core.domain.exceptions import ResourceNotFoundError
from financeiro.core.application.commands.transaction_commands import (
    CreateTransactionCommand,
    DeleteTransactionCommand,
    UpdateTransactionCommand,
)
from financeiro.core.application.queries.financeiro_queries import GetTransactionQuery, ListTransactionsQuery
from financeiro.core.domain.entities.transaction_entity import TransactionEntity
from financeiro.core.domain.repositories.charge_repository import ChargeRepository
from financeiro.core.domain.repositories.transaction_repository import TransactionRepository

_NOT_FOUND = "Transação não encontrada"


def _check_charge(charge_repo: ChargeRepository, cobranca_id, medico_id) -> None:
    if cobranca_id and charge_repo.find_by_id(str(cobranca_id), medico_id) is None:
        raise ResourceNotFoundError("Cobrança não encontrada")


class CreateTransactionHandler(CommandHandler[CreateTransactionCommand]):
    def __init__(self, repo: TransactionRepository, charge_repo: ChargeRepository):
        self.repo = repo
        self.charge_repo = charge_repo

    def handle(self, cmd: CreateTransactionCommand) -> TransactionEntity:
        _check_charge(self.charge_repo, cmd.payload.cobranca_id, cmd.medico_id)
        entity = TransactionEntity(id=uuid.uuid4(), medico_id=cmd.medico_id, **cmd.payload.model_dump())
        return self.repo.save(entity)


class UpdateTransactionHandler(CommandHandler[UpdateTransactionCommand]):
    def __init__(self, repo: TransactionRepository, charge_repo: ChargeRepository):
        self.repo = repo
        self.charge_repo = charge_repo

    def handle(self, cmd: UpdateTransactionCommand) -> TransactionEntity:
        current = self.repo.find_by_id(cmd.id, cmd.medico_id)
        if current is None:
            raise ResourceNotFoundError(_NOT_FOUND)
        changes = cmd.payload.model_dump(exclude_unset=True)
        for required in ("tipo_transacao", "descricao", "valor", "data_transacao"):
            if required in changes and changes[required] is None:
                del changes[required]
        _check_charge(self.charge_repo, changes.get("cobranca_id"), cmd.medico_id)
        return self.repo.save(replace(current, **changes))


class DeleteTransactionHandler(CommandHandler[DeleteTransactionCommand]):
    def __init__(self, repo: TransactionRepository):
        self.repo = repo

    def handle(self, cmd: DeleteTransactionCommand) -> None:
        if not self.repo.delete(cmd.id, cmd.medico_id):
            raise ResourceNotFoundError(_NOT_FOUND)


class ListTransactionsHandler(QueryHandler[ListTransactionsQuery, PagedResult[TransactionEntity]]):
    def __init__(self, repo: TransactionRepository):
        self.repo = repo

    def handle(self, q: ListTransactionsQuery) -> PagedResult[TransactionEntity]:
        return self.repo.list(filtros=q.filtros, page=q.page, page_size=q.page_size)


class GetTransactionHandler(QueryHandler[GetTransactionQuery, TransactionEntity]):
    def __init__(self, repo: TransactionRepository):
        self.repo = repo

    def handle(self, q: GetTransactionQuery) -> TransactionEntity:
        tx = self.repo.find_by_id(q.filtros["id"], q.filtros["medico_id"])
        if tx is None:
            raise ResourceNotFoundError(_NOT_FOUND)
        return tx
