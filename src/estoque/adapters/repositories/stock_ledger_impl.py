from __future__ import annotations

from datetime import datetime

import structlog
from django.db import transaction
from django.db.models import Case, F, IntegerField, Sum, Value, When
from django.db.models.functions import Coalesce
from django.utils import timezone

from clinica_core.core.domain.exceptions import InvalidRequestError, ResourceNotFoundError
from estoque.core.domain.entities.lot_entity import LotEntity
from estoque.core.domain.entities.movement_entity import LedgerPosting, MovementEntity
from estoque.core.domain.entities.product_entity import ProductEntity
from estoque.core.domain.repositories.stock_ledger import StockLedger
from estoque.core.domain.services.movement_rules import (
    MovementKind,
    apply_delta,
    check_quantity,
    signed_delta,
    withdraw_from_lot,
)
from plugins.django_interface.models import Lot as LotModel
from plugins.django_interface.models import Product as ProductModel
from plugins.django_interface.models import StockMovement as StockMovementModel

logger = structlog.get_logger(__name__)

_SIGNED_QTY = Case(
    When(tipo_movimentacao=MovementKind.SAIDA.value, then=-F("quantidade")),
    default=F("quantidade"),
    output_field=IntegerField(),
)

_LOT_EDITABLE = ("numero_lote", "data_validade", "data_entrada")


class StockLedgerImpl(StockLedger):
    # ─────────────────────────── travas ────────────────────────────
    def _lock_product(self, produto_id, medico_id) -> ProductModel:
        m = ProductModel.objects.select_for_update().filter(id=produto_id, medico_id=medico_id).first()
        if m is None:
            raise ResourceNotFoundError("Produto não encontrado")
        return m

    def _lock_lot(self, lote_id, medico_id) -> LotModel:
        m = LotModel.objects.select_for_update().filter(id=lote_id, medico_id=medico_id).first()
        if m is None:
            raise ResourceNotFoundError("Lote não encontrado")
        return m

    def _lock_lot_and_product(self, lote_id, medico_id) -> tuple[ProductModel, LotModel]:
        """Produto antes do lote, mesma ordem de `record_movement`."""
        produto_id = (
            LotModel.objects.filter(id=lote_id, medico_id=medico_id).values_list("produto_id", flat=True).first()
        )
        if produto_id is None:
            raise ResourceNotFoundError("Lote não encontrado")
        product = self._lock_product(produto_id, medico_id)
        return product, self._lock_lot(lote_id, medico_id)

    # ───────────────────────── lançamento ──────────────────────────
    def _post(
        self,
        product: ProductModel,
        lot: LotModel | None,
        kind: MovementKind,
        quantidade: int,
        *,
        data_movimentacao: datetime | None = None,
        origem_destino: str | None = None,
        observacoes: str | None = None,
    ) -> LedgerPosting:
        """Precisa rodar dentro de transaction.atomic com produto (e lote) travados."""
        check_quantity(kind, quantidade)
        novo_saldo = apply_delta(product.estoque_atual, signed_delta(kind, quantidade))

        if lot is not None and kind is MovementKind.SAIDA:
            lot.quantidade_lote = withdraw_from_lot(lot.quantidade_lote, quantidade)
            lot.save(update_fields=["quantidade_lote", "updated_at"])

        when = data_movimentacao or timezone.now()
        if timezone.is_naive(when):
            when = timezone.make_aware(when)

        mov = StockMovementModel.objects.create(
            medico_id=product.medico_id,
            produto=product,
            lote=lot,
            tipo_movimentacao=kind.value,
            quantidade=quantidade,
            data_movimentacao=when,
            origem_destino=origem_destino,
            observacoes=observacoes,
        )
        product.estoque_atual = novo_saldo
        product.save(update_fields=["estoque_atual", "updated_at"])

        logger.info(
            "estoque.movimentacao_registrada",
            produto_id=str(product.id),
            tipo=kind.value,
            quantidade=quantidade,
            saldo=novo_saldo,
        )
        return LedgerPosting(
            movement=MovementEntity.from_model(mov),
            saldo=novo_saldo,
            estoque_minimo=product.estoque_minimo,
        )

    def record_movement(
        self,
        *,
        medico_id: str,
        produto_id: str,
        kind: MovementKind,
        quantidade: int,
        lote_id: str | None = None,
        data_movimentacao: datetime | None = None,
        origem_destino: str | None = None,
        observacoes: str | None = None,
    ) -> LedgerPosting:
        check_quantity(kind, quantidade)
        with transaction.atomic():
            product = self._lock_product(produto_id, medico_id)
            lot = None
            if lote_id:
                lot = self._lock_lot(lote_id, medico_id)
                if lot.produto_id != product.id:
                    raise InvalidRequestError("Lote inválido", "O lote informado não pertence ao produto")
            return self._post(
                product,
                lot,
                kind,
                quantidade,
                data_movimentacao=data_movimentacao,
                origem_destino=origem_destino,
                observacoes=observacoes,
            )

    # ─────────────────────────── produto ───────────────────────────
    def create_product(self, product: ProductEntity, estoque_inicial: int) -> tuple[ProductEntity, LedgerPosting | None]:
        data = product.to_dict()
        for key in ("estoque_atual", "created_at", "updated_at"):
            data.pop(key, None)
        with transaction.atomic():
            m = ProductModel.objects.create(**data, estoque_atual=0)
            posting = None
            if estoque_inicial > 0:
                posting = self._post(m, None, MovementKind.ENTRADA, estoque_inicial, origem_destino="Estoque inicial")
        return ProductEntity.from_model(m), posting

    # ──────────────────────────── lotes ────────────────────────────
    def create_lot(self, lot: LotEntity) -> tuple[LotEntity, LedgerPosting]:
        with transaction.atomic():
            product = self._lock_product(lot.produto_id, lot.medico_id)
            m = LotModel.objects.create(
                id=lot.id,
                medico_id=product.medico_id,
                produto=product,
                numero_lote=lot.numero_lote,
                data_validade=lot.data_validade,
                quantidade_lote=lot.quantidade_lote,
                data_entrada=lot.data_entrada,
            )
            posting = self._post(
                product,
                m,
                MovementKind.ENTRADA,
                lot.quantidade_lote,
                origem_destino=f"Entrada do lote {lot.numero_lote}" if lot.numero_lote else "Entrada de lote",
            )
        return LotEntity.from_model(m), posting

    def update_lot(self, lote_id: str, medico_id: str, changes: dict) -> tuple[LotEntity, LedgerPosting | None]:
        with transaction.atomic():
            product, m = self._lock_lot_and_product(lote_id, medico_id)
            novo_produto = changes.get("produto_id")
            if novo_produto is not None and str(novo_produto) != str(m.produto_id):
                raise InvalidRequestError("Alteração inválida", "O produto de um lote não pode ser alterado")

            posting = None
            nova_qtd = changes.get("quantidade_lote")
            if nova_qtd is not None and nova_qtd != m.quantidade_lote:
                if nova_qtd < 0:
                    raise InvalidRequestError("Quantidade inválida", "quantidade_lote não pode ser negativa")
                posting = self._post(
                    product,
                    m,
                    MovementKind.AJUSTE,
                    nova_qtd - m.quantidade_lote,
                    origem_destino="Ajuste de lote",
                )
                m.quantidade_lote = nova_qtd

            for k in _LOT_EDITABLE:
                if changes.get(k) is not None:
                    setattr(m, k, changes[k])
            m.save()
        return LotEntity.from_model(m), posting

    def delete_lot(self, lote_id: str, medico_id: str) -> LedgerPosting | None:
        with transaction.atomic():
            product, m = self._lock_lot_and_product(lote_id, medico_id)
            posting = None
            if m.quantidade_lote > 0:
                posting = self._post(
                    product,
                    m,
                    MovementKind.AJUSTE,
                    -m.quantidade_lote,
                    origem_destino="Exclusão de lote",
                )
            m.delete()
        logger.info("estoque.lote_removido", lote_id=str(lote_id), medico_id=str(medico_id))
        return posting

    # ───────────────────────── conferência ─────────────────────────
    def ledger_balance(self, produto_id: str) -> int:
        agg = StockMovementModel.objects.filter(produto_id=produto_id).aggregate(
            saldo=Coalesce(Sum(_SIGNED_QTY), Value(0))
        )
        return agg["saldo"]

    def divergences(self, medico_id: str | None = None) -> list[tuple[ProductEntity, int]]:
        signed = Case(
            When(movimentacoes__tipo_movimentacao=MovementKind.SAIDA.value, then=-F("movimentacoes__quantidade")),
            default=F("movimentacoes__quantidade"),
            output_field=IntegerField(),
        )
        qs = ProductModel.objects.all()
        if medico_id:
            qs = qs.filter(medico_id=medico_id)
        qs = qs.annotate(saldo_livro=Coalesce(Sum(signed), Value(0))).exclude(estoque_atual=F("saldo_livro"))
        return [(ProductEntity.from_model(m), m.saldo_livro) for m in qs.order_by("nome_produto")]
