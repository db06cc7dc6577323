import uuid
from io import StringIO

from django.core.management import CommandError, call_command

from plugins.django_interface.models import Product, StockMovement
from tests.helpers.api import PRODUTOS, ApiTestCase, bearer


class ProductApiTests(ApiTestCase):
    def _create(self, **extra):
        body = {"nome_produto": "Amoxicilina", "preco_venda": "30.00", "custo_aquisicao": "11.90", **extra}
        return self.post(PRODUTOS, body)

    def test_initial_stock_is_posted_as_entry(self) -> None:
        resp = self._create(estoque_atual=25, tipo_produto="Medicamento")
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["estoque_atual"], 25)
        self.assertEqual(body["preco_venda"], 30.0)
        mov = StockMovement.objects.get(produto_id=body["id"])
        self.assertEqual((mov.tipo_movimentacao, mov.quantidade, mov.origem_destino), ("ENTRADA", 25, "Estoque inicial"))

    def test_zero_initial_stock_posts_nothing(self) -> None:
        body = self._create().json()
        self.assertEqual(body["estoque_atual"], 0)
        self.assertFalse(StockMovement.objects.filter(produto_id=body["id"]).exists())

    def test_invalid_payloads(self) -> None:
        self.assertEqual(self._create(preco_venda="-1").status_code, 400)
        self.assertEqual(self._create(tipo_produto="Cosmético").status_code, 400)
        self.assertEqual(self._create(estoque_atual=-3).status_code, 400)
        resp = self.post(PRODUTOS, {"preco_venda": "1.00", "custo_aquisicao": "1.00"})
        self.assertEqual(resp.status_code, 400)
        self.assertIn("details", resp.json())

    def test_update_ignores_balance(self) -> None:
        prod = self._create(estoque_atual=5).json()
        resp = self.put(f"{PRODUTOS}/{prod['id']}", {"estoque_atual": 999, "estoque_minimo": 5, "nome_produto": None})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["estoque_atual"], 5)
        self.assertEqual(body["nome_produto"], "Amoxicilina")
        self.assertTrue(body["abaixo_minimo"])

    def test_balance_endpoint_matches_ledger(self) -> None:
        prod = self._create(estoque_atual=7).json()
        body = self.get(f"{PRODUTOS}/{prod['id']}/saldo").json()
        self.assertEqual(body["estoque_atual"], 7)
        self.assertEqual(body["saldo_livro"], 7)
        self.assertTrue(body["consistente"])

    def test_filters_and_pagination(self) -> None:
        for i in range(3):
            self._create(nome_produto=f"Luva {i}", tipo_produto="Insumo")
        self._create(nome_produto="Seringa", estoque_minimo=2)

        body = self.get(f"{PRODUTOS}?search=luva&limit=2").json()
        self.assertEqual((body["total"], len(body["data"]), body["hasMore"]), (3, 2, True))
        body = self.get(f"{PRODUTOS}?search=luva&limit=2&page=2").json()
        self.assertEqual((len(body["data"]), body["hasMore"]), (1, False))

        body = self.get(f"{PRODUTOS}?abaixo_minimo=true").json()
        self.assertEqual([p["nome_produto"] for p in body["data"]], ["Seringa"])

        body = self.get(f"{PRODUTOS}?tipo_produto=Insumo").json()
        self.assertEqual(body["total"], 3)

    def test_invalid_pagination_is_400(self) -> None:
        self.assertEqual(self.get(f"{PRODUTOS}?limit=0").status_code, 400)
        self.assertEqual(self.get(f"{PRODUTOS}?limit=101").status_code, 400)
        self.assertEqual(self.get(f"{PRODUTOS}?page=abc").status_code, 400)
        self.assertEqual(self.get(f"{PRODUTOS}?limit=100").status_code, 200)

    def test_tenant_isolation(self) -> None:
        prod = self._create().json()
        other = bearer(uuid.uuid4())
        self.assertEqual(self.get(f"{PRODUTOS}/{prod['id']}", auth=other).status_code, 404)
        self.assertEqual(self.get(PRODUTOS, auth=other).json()["total"], 0)
        self.assertEqual(self.delete(f"{PRODUTOS}/{prod['id']}", auth=other).status_code, 404)
        self.assertEqual(self.delete(f"{PRODUTOS}/{prod['id']}").status_code, 204)


class CheckStockLedgerCommandTests(ApiTestCase):
    def test_reports_divergence(self) -> None:
        prod = self.post(
            PRODUTOS,
            {"nome_produto": "Gaze", "preco_venda": "2.00", "custo_aquisicao": "1.00", "estoque_atual": 4},
        ).json()

        out = StringIO()
        call_command("check_stock_ledger", stdout=out)
        self.assertIn("Nenhuma divergência", out.getvalue())

        Product.objects.filter(id=prod["id"]).update(estoque_atual=9)
        out = StringIO()
        call_command("check_stock_ledger", "--medico-id", str(self.medico_id), stdout=out)
        self.assertIn("livro=4", out.getvalue())

        with self.assertRaises(CommandError):
            call_command("check_stock_ledger", "--strict", stdout=StringIO())
