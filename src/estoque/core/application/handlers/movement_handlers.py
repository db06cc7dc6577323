from clinica_core.core.application.cqrs import CommandHandler, CommandOutcome, PagedResult, QueryHandler
from clinica_core.core.domain.exceptions import ResourceNotFoundError
from estoque.core.application.commands.movement_commands import RecordMovementCommand
from estoque.core.application.queries.stock_queries import GetMovementQuery, ListMovementsQuery
from estoque.core.application.services.stock_event_publisher import posting_events
from estoque.core.domain.entities.movement_entity import MovementEntity
from estoque.core.domain.repositories.movement_repository import MovementRepository
from estoque.core.domain.repositories.stock_ledger import StockLedger


class RecordMovementHandler(CommandHandler[RecordMovementCommand]):
    """
    Registra a movimentação e atualiza o saldo numa só transação.
    Os eventos vão no CommandOutcome e só saem depois do commit.
    """
    def __init__(self, ledger: StockLedger):
        self.ledger = ledger

    def handle(self, cmd: RecordMovementCommand) -> CommandOutcome[MovementEntity]:
        p = cmd.payload
        posting = self.ledger.record_movement(
            medico_id=cmd.medico_id,
            produto_id=str(p.produto_id),
            kind=p.tipo_movimentacao,
            quantidade=p.quantidade,
            lote_id=str(p.lote_id) if p.lote_id else None,
            data_movimentacao=p.data_movimentacao,
            origem_destino=p.origem_destino,
            observacoes=p.observacoes,
        )
        return CommandOutcome(posting.movement, posting_events(posting))


class ListMovementsHandler(QueryHandler[ListMovementsQuery, PagedResult[MovementEntity]]):
    def __init__(self, repo: MovementRepository):
        self.repo = repo

    def handle(self, q: ListMovementsQuery) -> PagedResult[MovementEntity]:
        return self.repo.list(filtros=q.filtros, page=q.page, page_size=q.page_size)


class GetMovementHandler(QueryHandler[GetMovementQuery, MovementEntity]):
    def __init__(self, repo: MovementRepository):
        self.repo = repo

    def handle(self, q: GetMovementQuery) -> MovementEntity:
        mov = self.repo.find_by_id(q.filtros["id"], q.filtros["medico_id"])
        if mov is None:
            raise ResourceNotFoundError("Movimentação não encontrada")
        return mov
