from abc import ABC, abstractmethod

from clinica_core.core.application.cqrs import PagedResult
from financeiro.core.domain.entities.transaction_entity import TransactionEntity


class TransactionRepository(ABC):
    @abstractmethod
    def find_by_id(self, transacao_id: str, medico_id: str) -> TransactionEntity | None:
        ...

    @abstractmethod
    def save(self, transaction: TransactionEntity) -> TransactionEntity:
        ...

    @abstractmethod
    def delete(self, transacao_id: str, medico_id: str) -> bool:
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[TransactionEntity]:
        """filtros: medico_id, tipo_transacao, search, data_inicio, data_fim."""
        ...
