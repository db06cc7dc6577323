import uuid

import structlog

from clinica_core.core.application.cqrs import CommandHandler, CommandOutcome, PagedResult, QueryHandler
from clinica_core.core.domain.exceptions import ResourceNotFoundError
from estoque.core.application.commands.product_commands import (
    CreateProductCommand,
    DeleteProductCommand,
    UpdateProductCommand,
)
from estoque.core.application.queries.stock_queries import (
    GetProductBalanceQuery,
    GetProductQuery,
    ListProductsQuery,
)
from estoque.core.application.services.stock_event_publisher import posting_events
from estoque.core.domain.entities.product_entity import ProductEntity
from estoque.core.domain.repositories.product_repository import ProductRepository
from estoque.core.domain.repositories.stock_ledger import StockLedger

logger = structlog.get_logger(__name__)

_NOT_FOUND = "Produto não encontrado"


class CreateProductHandler(CommandHandler[CreateProductCommand]):
    def __init__(self, ledger: StockLedger):
        self.ledger = ledger

    def handle(self, cmd: CreateProductCommand) -> CommandOutcome[ProductEntity]:
        data = cmd.payload.model_dump()
        estoque_inicial = data.pop("estoque_atual")
        entity = ProductEntity(id=uuid.uuid4(), medico_id=cmd.medico_id, **data)
        product, posting = self.ledger.create_product(entity, estoque_inicial)
        logger.info("produto.criado", produto_id=str(product.id), estoque_inicial=estoque_inicial)
        return CommandOutcome(product, posting_events(posting))


class UpdateProductHandler(CommandHandler[UpdateProductCommand]):
    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def handle(self, cmd: UpdateProductCommand) -> ProductEntity:
        changes = cmd.payload.model_dump(exclude_unset=True)
        # colunas NOT NULL: null explícito no PATCH é ignorado
        for required in ("nome_produto", "preco_venda", "custo_aquisicao", "tipo_produto", "estoque_minimo"):
            if required in changes and changes[required] is None:
                del changes[required]
        product = self.repo.update(cmd.id, cmd.medico_id, changes)
        if product is None:
            raise ResourceNotFoundError(_NOT_FOUND)
        return product


class DeleteProductHandler(CommandHandler[DeleteProductCommand]):
    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def handle(self, cmd: DeleteProductCommand) -> None:
        if not self.repo.delete(cmd.id, cmd.medico_id):
            raise ResourceNotFoundError(_NOT_FOUND)
        logger.info("produto.removido", produto_id=str(cmd.id), medico_id=str(cmd.medico_id))


class ListProductsHandler(QueryHandler[ListProductsQuery, PagedResult[ProductEntity]]):
    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def handle(self, q: ListProductsQuery) -> PagedResult[ProductEntity]:
        return self.repo.list(filtros=q.filtros, page=q.page, page_size=q.page_size)


class GetProductHandler(QueryHandler[GetProductQuery, ProductEntity]):
    def __init__(self, repo: ProductRepository):
        self.repo = repo

    def handle(self, q: GetProductQuery) -> ProductEntity:
        product = self.repo.find_by_id(q.filtros["id"], q.filtros["medico_id"])
        if product is None:
            raise ResourceNotFoundError(_NOT_FOUND)
        return product


class GetProductBalanceHandler(QueryHandler[GetProductBalanceQuery, dict]):
    def __init__(self, repo: ProductRepository, ledger: StockLedger):
        self.repo = repo
        self.ledger = ledger

    def handle(self, q: GetProductBalanceQuery) -> dict:
        product = self.repo.find_by_id(q.filtros["id"], q.filtros["medico_id"])
        if product is None:
            raise ResourceNotFoundError(_NOT_FOUND)
        saldo_livro = self.ledger.ledger_balance(str(product.id))
        return {
            "produto_id": str(product.id),
            "estoque_atual": product.estoque_atual,
            "saldo_livro": saldo_livro,
            "consistente": saldo_livro == product.estoque_atual,
            "estoque_minimo": product.estoque_minimo,
            "abaixo_minimo": product.abaixo_do_minimo(),
        }
