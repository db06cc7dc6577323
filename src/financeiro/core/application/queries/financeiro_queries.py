from dataclasses import dataclass

from clinica_core.core.application.cqrs import PaginatedQueryDTO, QueryDTO


@dataclass(frozen=True)
class ListChargesQuery(PaginatedQueryDTO[dict]):
    """filtros: medico_id, search, status_cobranca, paciente_id."""

@dataclass(frozen=True)
class GetChargeQuery(QueryDTO[dict]):
    """filtros: id, medico_id."""

@dataclass(frozen=True)
class ListTransactionsQuery(PaginatedQueryDTO[dict]):
    """filtros: medico_id, tipo_transacao, search, data_inicio, data_fim."""

@dataclass(frozen=True)
class GetTransactionQuery(QueryDTO[dict]):
    """filtros: id, medico_id."""
