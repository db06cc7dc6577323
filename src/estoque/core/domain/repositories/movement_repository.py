from abc import ABC, abstractmethod

from clinica_core.core.application.cqrs import PagedResult
from estoque.core.domain.entities.movement_entity import MovementEntity


class MovementRepository(ABC):
    """Leitura do livro-razão. Escritas passam sempre pelo StockLedger."""

    @abstractmethod
    def find_by_id(self, movimentacao_id: str, medico_id: str) -> MovementEntity | None:
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[MovementEntity]:
        ...
