from abc import ABC, abstractmethod

from financeiro.core.domain.entities.reconciliation_entity import ReconciliationEntity


class ReconciliationRepository(ABC):
    @abstractmethod
    def open(self, *, kind: str, medico_id: str, local_reference: str, external_id: str, error: str) -> ReconciliationEntity:
        ...

    @abstractmethod
    def list_pending(self, limit: int = 100) -> list[ReconciliationEntity]:
        ...

    @abstractmethod
    def mark_resolved(self, reconciliation_id: str) -> None:
        ...

    @abstractmethod
    def register_failure(self, reconciliation_id: str, error: str) -> None:
        ...
