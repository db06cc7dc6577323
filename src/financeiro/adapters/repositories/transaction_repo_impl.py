from django.db.models import Q

from clinica_core.core.application.cqrs import PagedResult
from financeiro.core.domain.entities.transaction_entity import TransactionEntity
from financeiro.core.domain.repositories.transaction_repository import TransactionRepository
from plugins.django_interface.models import FinancialTransaction as TransactionModel

_FIELDS = (
    "tipo_transacao",
    "descricao",
    "valor",
    "data_transacao",
    "categoria",
    "meio_pagamento",
    "cobranca_id",
)


class TransactionRepoImpl(TransactionRepository):
    def find_by_id(self, transacao_id: str, medico_id: str) -> TransactionEntity | None:
        m = TransactionModel.objects.filter(id=transacao_id, medico_id=medico_id).first()
        return TransactionEntity.from_model(m) if m else None

    def save(self, transaction: TransactionEntity) -> TransactionEntity:
        m, _ = TransactionModel.objects.update_or_create(
            id=transaction.id,
            medico_id=transaction.medico_id,
            defaults={k: getattr(transaction, k) for k in _FIELDS},
        )
        return TransactionEntity.from_model(m)

    def delete(self, transacao_id: str, medico_id: str) -> bool:
        deleted, _ = TransactionModel.objects.filter(id=transacao_id, medico_id=medico_id).delete()
        return deleted > 0

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[TransactionEntity]:
        qs = TransactionModel.objects.filter(medico_id=filtros["medico_id"])
        if filtros.get("tipo_transacao"):
            qs = qs.filter(tipo_transacao=filtros["tipo_transacao"])
        search = (filtros.get("search") or "").strip()
        if search:
            qs = qs.filter(Q(descricao__icontains=search) | Q(categoria__icontains=search))
        if filtros.get("data_inicio"):
            qs = qs.filter(data_transacao__gte=filtros["data_inicio"])
        if filtros.get("data_fim"):
            qs = qs.filter(data_transacao__lte=filtros["data_fim"])

        total = qs.count()
        offset = (page - 1) * page_size
        page_qs = qs.order_by("-data_transacao", "-created_at")[offset : offset + page_size]
        return PagedResult(
            items=[TransactionEntity.from_model(m) for m in page_qs],
            total=total,
            page=page,
            page_size=page_size,
        )
