from dataclasses import dataclass

from clinica_core.core.application.cqrs import PaginatedQueryDTO, QueryDTO


@dataclass(frozen=True)
class ListProductsQuery(PaginatedQueryDTO[dict]):
    """filtros: medico_id, search, tipo_produto, abaixo_minimo."""

@dataclass(frozen=True)
class GetProductQuery(QueryDTO[dict]):
    """filtros: id, medico_id."""

@dataclass(frozen=True)
class GetProductBalanceQuery(QueryDTO[dict]):
    """Saldo gravado x soma do livro-razão. filtros: id, medico_id."""

@dataclass(frozen=True)
class ListLotsQuery(PaginatedQueryDTO[dict]):
    """filtros: medico_id, produto_id, vencimento_ate."""

@dataclass(frozen=True)
class GetLotQuery(QueryDTO[dict]):
    """filtros: id, medico_id."""

@dataclass(frozen=True)
class ListMovementsQuery(PaginatedQueryDTO[dict]):
    """filtros: medico_id, produto_id, lote_id, tipo_movimentacao."""

@dataclass(frozen=True)
class GetMovementQuery(QueryDTO[dict]):
    """filtros: id, medico_id."""
