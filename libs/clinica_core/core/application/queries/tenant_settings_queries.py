from dataclasses import dataclass

from clinica_core.core.application.cqrs import QueryDTO


@dataclass(frozen=True)
class GetTenantSettingsQuery(QueryDTO[dict]):
    """filtros: medico_id."""
