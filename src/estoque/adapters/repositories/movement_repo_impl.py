from clinica_core.core.application.cqrs import PagedResult
from estoque.core.domain.entities.movement_entity import MovementEntity
from estoque.core.domain.repositories.movement_repository import MovementRepository
from plugins.django_interface.models import StockMovement as StockMovementModel


class MovementRepoImpl(MovementRepository):
    def find_by_id(self, movimentacao_id: str, medico_id: str) -> MovementEntity | None:
        m = StockMovementModel.objects.filter(id=movimentacao_id, medico_id=medico_id).first()
        return MovementEntity.from_model(m) if m else None

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[MovementEntity]:
        qs = StockMovementModel.objects.filter(medico_id=filtros["medico_id"])
        for key in ("produto_id", "lote_id", "tipo_movimentacao"):
            if filtros.get(key):
                qs = qs.filter(**{key: filtros[key]})

        total = qs.count()
        offset = (page - 1) * page_size
        page_qs = qs.order_by("-data_movimentacao", "-created_at")[offset : offset + page_size]
        return PagedResult(
            items=[MovementEntity.from_model(m) for m in page_qs],
            total=total,
            page=page,
            page_size=page_size,
        )
