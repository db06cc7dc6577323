from abc import ABC, abstractmethod

from clinica_core.core.domain.entities.tenant_settings_entity import TenantSettingsEntity


class TenantSettingsRepository(ABC):
    @abstractmethod
    def get(self, medico_id: str) -> TenantSettingsEntity:
        """Configurações do médico; devolve valores padrão se ainda não existirem."""
        ...

    @abstractmethod
    def update_pix_key(self, medico_id: str, pix_key: str | None) -> TenantSettingsEntity:
        ...
