"""Livro de movimentações: saldo, lotes e rejeições."""

import threading
import uuid
from datetime import date, timedelta
from unittest.mock import patch

from django.db import connection
from django.test import TransactionTestCase, skipUnlessDBFeature

from clinica_core.core.domain.exceptions import InsufficientStockError
from estoque.adapters.repositories.stock_ledger_impl import StockLedgerImpl
from estoque.core.domain.services.movement_rules import MovementKind
from plugins.django_interface.models import Lot, Product, StockMovement
from tests.helpers.api import LOTES, MOVIMENTACOES, ApiTestCase, bearer


class MovementLedgerTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.product = self.make_product()

    def _move(self, tipo: str, quantidade, **extra):
        body = {"produto_id": str(self.product.id), "tipo_movimentacao": tipo, "quantidade": quantidade, **extra}
        return self.post(MOVIMENTACOES, body)

    def _saldo(self) -> int:
        return Product.objects.get(id=self.product.id).estoque_atual

    def test_entry_then_exits_reject_when_balance_would_go_negative(self) -> None:
        self.assertEqual(self._move("ENTRADA", 50).status_code, 201)
        self.assertEqual(self._saldo(), 50)

        self.assertEqual(self._move("SAIDA", 20).status_code, 201)
        self.assertEqual(self._saldo(), 30)

        resp = self._move("SAIDA", 40)
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"], "Estoque insuficiente")
        self.assertEqual(self._saldo(), 30)
        self.assertEqual(StockMovement.objects.filter(produto=self.product).count(), 2)

    def test_signed_adjustment(self) -> None:
        self._move("ENTRADA", 10)
        resp = self._move("AJUSTE", -3, observacoes="Inventário")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["quantidade"], -3)
        self.assertEqual(self._saldo(), 7)

        self.assertEqual(self._move("AJUSTE", -8).status_code, 409)
        self.assertEqual(self._saldo(), 7)

    def test_invalid_quantities_and_kinds_are_400(self) -> None:
        self.assertEqual(self._move("ENTRADA", 0).status_code, 400)
        self.assertEqual(self._move("SAIDA", -5).status_code, 400)
        self.assertEqual(self._move("AJUSTE", 0).status_code, 400)
        self.assertEqual(self._move("ENTRADA", 2.5).status_code, 400)
        self.assertEqual(self._move("DOACAO", 3).status_code, 400)
        self.assertEqual(self._saldo(), 0)
        self.assertFalse(StockMovement.objects.exists())

    def test_missing_product_is_400_and_unknown_product_404(self) -> None:
        resp = self.post(MOVIMENTACOES, {"tipo_movimentacao": "ENTRADA", "quantidade": 1})
        self.assertEqual(resp.status_code, 400)
        resp = self.post(
            MOVIMENTACOES,
            {"produto_id": str(uuid.uuid4()), "tipo_movimentacao": "ENTRADA", "quantidade": 1},
        )
        self.assertEqual(resp.status_code, 404)

    def test_product_of_other_tenant_is_404(self) -> None:
        resp = self.post(
            MOVIMENTACOES,
            {"produto_id": str(self.product.id), "tipo_movimentacao": "ENTRADA", "quantidade": 1},
            auth=bearer(uuid.uuid4()),
        )
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(self._saldo(), 0)

    def test_exit_from_lot_decrements_lot_and_rejects_overdraw(self) -> None:
        lot = self.post(
            LOTES,
            {"produto_id": str(self.product.id), "data_validade": "2030-01-31", "quantidade_lote": 10},
        ).json()
        self._move("ENTRADA", 20)
        self.assertEqual(self._saldo(), 30)

        resp = self._move("SAIDA", 4, lote_id=lot["id"])
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(Lot.objects.get(id=lot["id"]).quantidade_lote, 6)
        self.assertEqual(self._saldo(), 26)

        resp = self._move("SAIDA", 7, lote_id=lot["id"])
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"], "Quantidade insuficiente no lote")
        self.assertEqual(Lot.objects.get(id=lot["id"]).quantidade_lote, 6)
        self.assertEqual(self._saldo(), 26)

    def test_lot_of_other_product_is_400(self) -> None:
        other = self.make_product(nome_produto="Soro")
        lot = Lot.objects.create(
            medico_id=self.medico_id, produto=other, data_validade=date(2030, 1, 1),
            quantidade_lote=5, data_entrada=date.today(),
        )
        self._move("ENTRADA", 5)
        resp = self._move("SAIDA", 1, lote_id=str(lot.id))
        self.assertEqual(resp.status_code, 400)

    def test_movements_are_immutable(self) -> None:
        mov = self._move("ENTRADA", 5).json()
        url = f"{MOVIMENTACOES}/{mov['id']}"
        self.assertEqual(self.put(url, {"quantidade": 9}).status_code, 405)
        self.assertEqual(self.delete(url).status_code, 405)
        self.assertEqual(self.get(url).json()["quantidade"], 5)

    def test_low_stock_is_reported_after_commit(self) -> None:
        Product.objects.filter(id=self.product.id).update(estoque_minimo=10)
        self._move("ENTRADA", 12)
        with patch("estoque.core.application.services.stock_event_publisher.logger") as log:
            self._move("SAIDA", 3)
        log.warning.assert_called_once()
        args, kwargs = log.warning.call_args
        self.assertEqual(args, ("estoque.abaixo_do_minimo",))
        self.assertEqual((kwargs["saldo"], kwargs["estoque_minimo"]), (9, 10))

    def test_list_filters_and_orders_by_date_desc(self) -> None:
        self._move("ENTRADA", 5, data_movimentacao="2024-01-01T10:00:00")
        self._move("ENTRADA", 3, data_movimentacao="2024-02-01T10:00:00")
        self._move("SAIDA", 1, data_movimentacao="2024-03-01T10:00:00")

        body = self.get(f"{MOVIMENTACOES}?produto_id={self.product.id}").json()
        self.assertEqual([m["quantidade"] for m in body["data"]], [1, 3, 5])
        self.assertEqual(body["total"], 3)

        saidas = self.get(f"{MOVIMENTACOES}?tipo_movimentacao=SAIDA").json()
        self.assertEqual(saidas["total"], 1)


class LotRegistryTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.product = self.make_product()

    def _lot(self, quantidade=10, validade="2030-06-30", **extra):
        body = {"produto_id": str(self.product.id), "data_validade": validade, "quantidade_lote": quantidade, **extra}
        return self.post(LOTES, body)

    def _saldo(self) -> int:
        return Product.objects.get(id=self.product.id).estoque_atual

    def test_create_lot_posts_entry_linked_to_lot(self) -> None:
        resp = self._lot(10, numero_lote="L-001")
        self.assertEqual(resp.status_code, 201)
        lot = resp.json()
        self.assertEqual(lot["data_entrada"], date.today().isoformat())
        self.assertEqual(self._saldo(), 10)
        mov = StockMovement.objects.get(lote_id=lot["id"])
        self.assertEqual((mov.tipo_movimentacao, mov.quantidade), ("ENTRADA", 10))

    def test_create_lot_requires_positive_quantity(self) -> None:
        self.assertEqual(self._lot(0).status_code, 400)
        self.assertEqual(self._saldo(), 0)

    def test_update_quantity_posts_adjustment(self) -> None:
        lot = self._lot(10).json()
        resp = self.put(f"{LOTES}/{lot['id']}", {"quantidade_lote": 4})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["quantidade_lote"], 4)
        self.assertEqual(self._saldo(), 4)
        ajuste = StockMovement.objects.get(tipo_movimentacao="AJUSTE")
        self.assertEqual(ajuste.quantidade, -6)

    def test_update_rejects_product_change(self) -> None:
        lot = self._lot(10).json()
        other = self.make_product(nome_produto="Outro")
        resp = self.put(f"{LOTES}/{lot['id']}", {"produto_id": str(other.id)})
        self.assertEqual(resp.status_code, 400)

    def test_update_rejected_when_product_balance_is_insufficient(self) -> None:
        lot = self._lot(10).json()
        self.post(MOVIMENTACOES, {"produto_id": str(self.product.id), "tipo_movimentacao": "SAIDA", "quantidade": 8})
        resp = self.put(f"{LOTES}/{lot['id']}", {"quantidade_lote": 0})
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(Lot.objects.get(id=lot["id"]).quantidade_lote, 10)
        self.assertEqual(self._saldo(), 2)

    def test_delete_lot_adjusts_balance_and_keeps_history(self) -> None:
        lot = self._lot(10).json()
        self.assertEqual(self.delete(f"{LOTES}/{lot['id']}").status_code, 204)
        self.assertEqual(self._saldo(), 0)
        self.assertFalse(Lot.objects.filter(id=lot["id"]).exists())
        kinds = sorted(StockMovement.objects.filter(produto=self.product).values_list("tipo_movimentacao", "quantidade"))
        self.assertEqual(kinds, [("AJUSTE", -10), ("ENTRADA", 10)])
        self.assertFalse(StockMovement.objects.filter(lote__isnull=False).exists())

    def test_list_is_fefo_and_filters_expiring(self) -> None:
        hoje = date.today()
        self._lot(1, validade=(hoje + timedelta(days=90)).isoformat(), numero_lote="C")
        self._lot(1, validade=(hoje + timedelta(days=10)).isoformat(), numero_lote="A")
        self._lot(1, validade=(hoje + timedelta(days=30)).isoformat(), numero_lote="B")

        body = self.get(LOTES).json()
        self.assertEqual([lot["numero_lote"] for lot in body["data"]], ["A", "B", "C"])

        limite = (hoje + timedelta(days=30)).isoformat()
        body = self.get(f"{LOTES}?vencimento_ate={limite}").json()
        self.assertEqual([lot["numero_lote"] for lot in body["data"]], ["A", "B"])


class LedgerLockOrderTests(ApiTestCase):
    """Toda operação que trava lote trava o produto antes."""

    def setUp(self) -> None:
        super().setUp()
        self.product = self.make_product()
        self.order: list[str] = []

    def _record_locks(self):
        lock_product, lock_lot = StockLedgerImpl._lock_product, StockLedgerImpl._lock_lot

        def product_first(ledger, *args):
            self.order.append("produto")
            return lock_product(ledger, *args)

        def then_lot(ledger, *args):
            self.order.append("lote")
            return lock_lot(ledger, *args)

        return (
            patch.object(StockLedgerImpl, "_lock_product", autospec=True, side_effect=product_first),
            patch.object(StockLedgerImpl, "_lock_lot", autospec=True, side_effect=then_lot),
        )

    def test_product_row_is_locked_before_lot_row(self) -> None:
        body = {"produto_id": str(self.product.id), "data_validade": "2030-06-30", "quantidade_lote": 10}
        lot = self.post(LOTES, body).json()

        patch_product, patch_lot = self._record_locks()
        with patch_product, patch_lot:
            saida = {
                "produto_id": str(self.product.id),
                "lote_id": lot["id"],
                "tipo_movimentacao": "SAIDA",
                "quantidade": 2,
            }
            self.assertEqual(self.post(MOVIMENTACOES, saida).status_code, 201)
            self.assertEqual(self.put(f"{LOTES}/{lot['id']}", {"quantidade_lote": 5}).status_code, 200)
            self.assertEqual(self.delete(f"{LOTES}/{lot['id']}").status_code, 204)

        self.assertEqual(self.order, ["produto", "lote"] * 3)


@skipUnlessDBFeature("has_select_for_update")
class ConcurrentPostingTests(TransactionTestCase):
    """Saídas simultâneas no mesmo produto: saldo nunca negativo e igual ao livro."""

    WORKERS = 8

    def test_concurrent_exits_keep_balance_equal_to_ledger(self) -> None:
        medico_id = str(uuid.uuid4())
        product = Product.objects.create(
            medico_id=medico_id, nome_produto="Luva", preco_venda="1.00", custo_aquisicao="0.50"
        )
        ledger = StockLedgerImpl()
        ledger.record_movement(
            medico_id=medico_id, produto_id=str(product.id), kind=MovementKind.ENTRADA, quantidade=20
        )

        barrier = threading.Barrier(self.WORKERS)
        results: list[str] = []
        lock = threading.Lock()

        def worker() -> None:
            try:
                barrier.wait()
                try:
                    ledger.record_movement(
                        medico_id=medico_id, produto_id=str(product.id), kind=MovementKind.SAIDA, quantidade=5
                    )
                    outcome = "ok"
                except InsufficientStockError:
                    outcome = "recusada"
                with lock:
                    results.append(outcome)
            finally:
                connection.close()

        threads = [threading.Thread(target=worker) for _ in range(self.WORKERS)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(sorted(results), ["ok"] * 4 + ["recusada"] * 4)
        product.refresh_from_db()
        self.assertEqual(product.estoque_atual, 0)
        self.assertEqual(ledger.ledger_balance(str(product.id)), product.estoque_atual)
        self.assertEqual(StockMovement.objects.filter(produto=product, tipo_movimentacao="SAIDA").count(), 4)
