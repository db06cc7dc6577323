from abc import ABC, abstractmethod
from datetime import datetime

from estoque.core.domain.entities.lot_entity import LotEntity
from estoque.core.domain.entities.movement_entity import LedgerPosting
from estoque.core.domain.entities.product_entity import ProductEntity
from estoque.core.domain.services.movement_rules import MovementKind


class StockLedger(ABC):
    """
    Toda alteração de saldo passa por aqui, numa única transação com as
    linhas de produto/lote travadas. O saldo gravado é sempre a soma das
    movimentações com sinal.
    """

    @abstractmethod
    def record_movement(
        self,
        *,
        medico_id: str,
        produto_id: str,
        kind: MovementKind,
        quantidade: int,
        lote_id: str | None = None,
        data_movimentacao: datetime | None = None,
        origem_destino: str | None = None,
        observacoes: str | None = None,
    ) -> LedgerPosting:
        ...

    @abstractmethod
    def create_product(self, product: ProductEntity, estoque_inicial: int) -> tuple[ProductEntity, LedgerPosting | None]:
        """Cria o produto com saldo zero e lança o estoque inicial como ENTRADA."""
        ...

    @abstractmethod
    def create_lot(self, lot: LotEntity) -> tuple[LotEntity, LedgerPosting]:
        ...

    @abstractmethod
    def update_lot(self, lote_id: str, medico_id: str, changes: dict) -> tuple[LotEntity, LedgerPosting | None]:
        """Mudança de quantidade vira AJUSTE (nova − antiga)."""
        ...

    @abstractmethod
    def delete_lot(self, lote_id: str, medico_id: str) -> LedgerPosting | None:
        """Estorna o saldo restante do lote com um AJUSTE negativo e remove o lote."""
        ...

    @abstractmethod
    def ledger_balance(self, produto_id: str) -> int:
        """Soma das movimentações com sinal."""
        ...

    @abstractmethod
    def divergences(self, medico_id: str | None = None) -> list[tuple[ProductEntity, int]]:
        """Produtos cujo saldo gravado difere da soma do livro-razão."""
        ...
