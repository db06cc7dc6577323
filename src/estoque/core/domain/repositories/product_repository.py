from abc import ABC, abstractmethod

from clinica_core.core.application.cqrs import PagedResult
from estoque.core.domain.entities.product_entity import ProductEntity


class ProductRepository(ABC):
    @abstractmethod
    def find_by_id(self, produto_id: str, medico_id: str) -> ProductEntity | None:
        ...

    @abstractmethod
    def update(self, produto_id: str, medico_id: str, changes: dict) -> ProductEntity | None:
        """Atualiza dados cadastrais. `estoque_atual` nunca é alterado por aqui."""
        ...

    @abstractmethod
    def delete(self, produto_id: str, medico_id: str) -> bool:
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[ProductEntity]:
        """
        filtros: medico_id (obrigatório), search, tipo_produto, abaixo_minimo.
        """
        ...
