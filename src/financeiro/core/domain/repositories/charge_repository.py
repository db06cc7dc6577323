from abc import ABC, abstractmethod

from clinica_core.core.application.cqrs import PagedResult
from financeiro.core.domain.entities.charge_entity import ChargeEntity


class ChargeRepository(ABC):
    @abstractmethod
    def find_by_id(self, charge_id: str, medico_id: str) -> ChargeEntity | None:
        ...

    @abstractmethod
    def lock_for_update(self, charge_id: str, medico_id: str | None = None) -> ChargeEntity | None:
        """
        SELECT ... FOR UPDATE. Sem `medico_id` a busca não filtra tenant
        (uso exclusivo do webhook, que correlaciona pela referência externa).
        """
        ...

    @abstractmethod
    def insert(self, charge: ChargeEntity) -> ChargeEntity:
        ...

    @abstractmethod
    def update_fields(self, charge_id: str, fields: dict) -> ChargeEntity:
        ...

    @abstractmethod
    def delete(self, charge_id: str, medico_id: str) -> bool:
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[ChargeEntity]:
        """filtros: medico_id, search, status_cobranca, paciente_id."""
        ...
