from abc import ABC, abstractmethod

from clinica_core.core.application.cqrs import PagedResult
from estoque.core.domain.entities.lot_entity import LotEntity


class LotRepository(ABC):
    @abstractmethod
    def find_by_id(self, lote_id: str, medico_id: str) -> LotEntity | None:
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[LotEntity]:
        """Ordenado por data_validade (primeiro a vencer, primeiro a sair)."""
        ...
