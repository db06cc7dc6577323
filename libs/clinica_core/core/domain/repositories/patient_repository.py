from abc import ABC, abstractmethod

from clinica_core.core.application.cqrs import PagedResult
from clinica_core.core.domain.entities.patient_entity import PatientEntity


class PatientRepository(ABC):
    @abstractmethod
    def find_by_id(self, patient_id: str, medico_id: str) -> PatientEntity | None:
        """Retorna o paciente do médico ou None (inexistente ou de outro médico)."""
        ...

    @abstractmethod
    def lock_for_update(self, patient_id: str, medico_id: str) -> PatientEntity | None:
        """
        Igual a `find_by_id`, mas trava a linha (SELECT ... FOR UPDATE).
        Deve ser chamado dentro de uma transação.
        """
        ...

    @abstractmethod
    def save(self, patient: PatientEntity) -> PatientEntity:
        """Cria ou atualiza um paciente. CPF duplicado no mesmo médico → ConflictError."""
        ...

    @abstractmethod
    def set_provider_customer_id(self, patient_id: str, customer_id: str) -> None:
        """Grava o id de cliente do gateway (cache da Customer Reference)."""
        ...

    @abstractmethod
    def delete(self, patient_id: str, medico_id: str) -> bool:
        """Remove o paciente; retorna False se não existir para o médico."""
        ...

    @abstractmethod
    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[PatientEntity]:
        """
        Retorna PagedResult contendo lista da Entidade e total,
        aplicando paginação sobre o Modelo.

        - filtros: dicionário de filtros (sempre inclui medico_id)
        - page: número da página (1-based)
        - page_size: quantidade de itens por página
        """
        ...
