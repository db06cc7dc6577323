import uuid

from django.utils import timezone

from clinica_core.core.application.cqrs import CommandHandler, CommandOutcome, PagedResult, QueryHandler
from clinica_core.core.domain.exceptions import ResourceNotFoundError
from estoque.core.application.commands.lot_commands import CreateLotCommand, DeleteLotCommand, UpdateLotCommand
from estoque.core.application.queries.stock_queries import GetLotQuery, ListLotsQuery
from estoque.core.application.services.stock_event_publisher import posting_events
from estoque.core.domain.entities.lot_entity import LotEntity
from estoque.core.domain.repositories.lot_repository import LotRepository
from estoque.core.domain.repositories.stock_ledger import StockLedger


class CreateLotHandler(CommandHandler[CreateLotCommand]):
    def __init__(self, ledger: StockLedger):
        self.ledger = ledger

    def handle(self, cmd: CreateLotCommand) -> CommandOutcome[LotEntity]:
        p = cmd.payload
        entity = LotEntity(
            id=uuid.uuid4(),
            medico_id=cmd.medico_id,
            produto_id=p.produto_id,
            data_validade=p.data_validade,
            quantidade_lote=p.quantidade_lote,
            data_entrada=p.data_entrada or timezone.localdate(),
            numero_lote=p.numero_lote,
        )
        lot, posting = self.ledger.create_lot(entity)
        return CommandOutcome(lot, posting_events(posting))


class UpdateLotHandler(CommandHandler[UpdateLotCommand]):
    def __init__(self, ledger: StockLedger):
        self.ledger = ledger

    def handle(self, cmd: UpdateLotCommand) -> CommandOutcome[LotEntity]:
        lot, posting = self.ledger.update_lot(cmd.id, cmd.medico_id, cmd.payload.model_dump(exclude_unset=True))
        return CommandOutcome(lot, posting_events(posting))


class DeleteLotHandler(CommandHandler[DeleteLotCommand]):
    def __init__(self, ledger: StockLedger):
        self.ledger = ledger

    def handle(self, cmd: DeleteLotCommand) -> CommandOutcome[None]:
        return CommandOutcome(None, posting_events(self.ledger.delete_lot(cmd.id, cmd.medico_id)))


class ListLotsHandler(QueryHandler[ListLotsQuery, PagedResult[LotEntity]]):
    def __init__(self, repo: LotRepository):
        self.repo = repo

    def handle(self, q: ListLotsQuery) -> PagedResult[LotEntity]:
        return self.repo.list(filtros=q.filtros, page=q.page, page_size=q.page_size)


class GetLotHandler(QueryHandler[GetLotQuery, LotEntity]):
    def __init__(self, repo: LotRepository):
        self.repo = repo

    def handle(self, q: GetLotQuery) -> LotEntity:
        lot = self.repo.find_by_id(q.filtros["id"], q.filtros["medico_id"])
        if lot is None:
            raise ResourceNotFoundError("Lote não encontrado")
        return lot
