from dataclasses import dataclass

from clinica_core.core.application.cqrs import PaginatedQueryDTO, QueryDTO


@dataclass(frozen=True)
class ListPatientsQuery(PaginatedQueryDTO[dict]):
    """
    Query paginada para listar pacientes do médico.
    filtros: medico_id (obrigatório), search, status_paciente.
    """


@dataclass(frozen=True)
class GetPatientQuery(QueryDTO[dict]):
    """filtros: id, medico_id."""
