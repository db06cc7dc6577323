from dataclasses import dataclass

from clinica_core.core.application.cqrs import CommandDTO
from clinica_core.core.application.dtos.tenant_settings_dto import TenantSettingsDTO


@dataclass(frozen=True, slots=True)
class UpdateTenantSettingsCommand(CommandDTO):
    medico_id: str
    payload: TenantSettingsDTO
