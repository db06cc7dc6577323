from django.db.models import F, Q

from clinica_core.core.application.cqrs import PagedResult
from financeiro.core.domain.entities.charge_entity import ChargeEntity
from financeiro.core.domain.repositories.charge_repository import ChargeRepository
from plugins.django_interface.models import Charge as ChargeModel

_UPDATABLE = {
    "descricao",
    "valor",
    "data_vencimento",
    "metodo_pagamento",
    "status_cobranca",
    "asaas_charge_id",
    "link_pagamento",
    "pix_copia_cola",
    "qr_code_pix_base64",
    "data_pagamento",
}


def _qs():
    return ChargeModel.objects.annotate(paciente_nome=F("paciente__nome_completo"))


class ChargeRepoImpl(ChargeRepository):
    def find_by_id(self, charge_id: str, medico_id: str) -> ChargeEntity | None:
        m = _qs().filter(id=charge_id, medico_id=medico_id).first()
        return ChargeEntity.from_model(m) if m else None

    def lock_for_update(self, charge_id: str, medico_id: str | None = None) -> ChargeEntity | None:
        qs = ChargeModel.objects.select_for_update().filter(id=charge_id)
        if medico_id is not None:
            qs = qs.filter(medico_id=medico_id)
        if qs.first() is None:
            return None
        return ChargeEntity.from_model(_qs().get(id=charge_id))

    def insert(self, charge: ChargeEntity) -> ChargeEntity:
        data = charge.to_dict()
        for key in ("created_at", "updated_at", "paciente_nome"):
            data.pop(key, None)
        ChargeModel.objects.create(**data)
        return ChargeEntity.from_model(_qs().get(id=charge.id))

    def update_fields(self, charge_id: str, fields: dict) -> ChargeEntity:
        m = ChargeModel.objects.get(id=charge_id)
        names = [k for k in fields if k in _UPDATABLE]
        for k in names:
            setattr(m, k, fields[k])
        if names:
            m.save(update_fields=[*names, "updated_at"])
        return ChargeEntity.from_model(_qs().get(id=charge_id))

    def delete(self, charge_id: str, medico_id: str) -> bool:
        deleted, _ = ChargeModel.objects.filter(id=charge_id, medico_id=medico_id).delete()
        return deleted > 0

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[ChargeEntity]:
        qs = _qs().filter(medico_id=filtros["medico_id"])

        search = (filtros.get("search") or "").strip()
        if search:
            qs = qs.filter(Q(descricao__icontains=search) | Q(paciente__nome_completo__icontains=search))
        if filtros.get("status_cobranca"):
            qs = qs.filter(status_cobranca=filtros["status_cobranca"])
        if filtros.get("paciente_id"):
            qs = qs.filter(paciente_id=filtros["paciente_id"])

        total = qs.count()
        offset = (page - 1) * page_size
        page_qs = qs.order_by("-created_at", "id")[offset : offset + page_size]
        return PagedResult(
            items=[ChargeEntity.from_model(m) for m in page_qs],
            total=total,
            page=page,
            page_size=page_size,
        )
