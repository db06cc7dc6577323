from clinica_core.core.application.cqrs import PagedResult
from estoque.core.domain.entities.lot_entity import LotEntity
from estoque.core.domain.repositories.lot_repository import LotRepository
from plugins.django_interface.models import Lot as LotModel


class LotRepoImpl(LotRepository):
    def find_by_id(self, lote_id: str, medico_id: str) -> LotEntity | None:
        m = LotModel.objects.filter(id=lote_id, medico_id=medico_id).first()
        return LotEntity.from_model(m) if m else None

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[LotEntity]:
        qs = LotModel.objects.filter(medico_id=filtros["medico_id"])
        if filtros.get("produto_id"):
            qs = qs.filter(produto_id=filtros["produto_id"])
        if filtros.get("vencimento_ate"):
            qs = qs.filter(data_validade__lte=filtros["vencimento_ate"])

        total = qs.count()
        offset = (page - 1) * page_size
        page_qs = qs.order_by("data_validade", "created_at", "id")[offset : offset + page_size]
        return PagedResult(
            items=[LotEntity.from_model(m) for m in page_qs],
            total=total,
            page=page,
            page_size=page_size,
        )
