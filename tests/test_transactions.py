import uuid
from datetime import date
from decimal import Decimal

from plugins.django_interface.models import Charge, FinancialTransaction
from tests.helpers.api import TRANSACOES, ApiTestCase, bearer


class TransactionApiTests(ApiTestCase):
    def _create(self, **extra):
        body = {
            "tipo_transacao": "DESPESA",
            "descricao": "Aluguel da sala",
            "valor": "2500.00",
            "data_transacao": "2030-02-05",
            "categoria": "Infraestrutura",
            **extra,
        }
        return self.post(TRANSACOES, body)

    def _charge(self, medico_id) -> Charge:
        return Charge.objects.create(
            medico_id=medico_id,
            paciente=self.make_patient(medico_id=medico_id, cpf=None),
            descricao="Consulta",
            valor=Decimal("300.00"),
            data_vencimento=date(2030, 2, 1),
            metodo_pagamento="PIX",
        )

    def test_crud(self) -> None:
        resp = self._create()
        self.assertEqual(resp.status_code, 201)
        tx = resp.json()
        self.assertEqual((tx["valor"], tx["cobranca_id"]), (2500.0, None))

        url = f"{TRANSACOES}/{tx['id']}"
        resp = self.put(url, {"valor": "2600.00", "descricao": None})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual((resp.json()["valor"], resp.json()["descricao"]), (2600.0, "Aluguel da sala"))

        self.assertEqual(self.get(url).json()["categoria"], "Infraestrutura")
        self.assertEqual(self.delete(url).status_code, 204)
        self.assertEqual(self.get(url).status_code, 404)
        self.assertEqual(self.delete(url).status_code, 404)

    def test_validation(self) -> None:
        self.assertEqual(self._create(tipo_transacao="TRANSFERENCIA").status_code, 400)
        self.assertEqual(self._create(valor="-10").status_code, 400)
        self.assertEqual(self._create(data_transacao="05/02/2030").status_code, 400)
        self.assertFalse(FinancialTransaction.objects.exists())

    def test_linked_charge_must_belong_to_doctor(self) -> None:
        own = self._charge(self.medico_id)
        resp = self._create(tipo_transacao="RECEITA", cobranca_id=str(own.id))
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["cobranca_id"], str(own.id))

        foreign = self._charge(uuid.uuid4())
        resp = self._create(tipo_transacao="RECEITA", cobranca_id=str(foreign.id))
        self.assertEqual(resp.status_code, 404)
        tx = self._create().json()
        self.assertEqual(self.put(f"{TRANSACOES}/{tx['id']}", {"cobranca_id": str(foreign.id)}).status_code, 404)

    def test_filters(self) -> None:
        self._create(data_transacao="2030-01-10")
        self._create(tipo_transacao="RECEITA", descricao="Consulta particular", data_transacao="2030-01-20")
        self._create(tipo_transacao="RECEITA", descricao="Retorno", data_transacao="2030-03-01")

        body = self.get(f"{TRANSACOES}?tipo_transacao=RECEITA").json()
        self.assertEqual([t["descricao"] for t in body["data"]], ["Retorno", "Consulta particular"])

        body = self.get(f"{TRANSACOES}?data_inicio=2030-01-15&data_fim=2030-02-28").json()
        self.assertEqual(body["total"], 1)

        body = self.get(f"{TRANSACOES}?search=infra").json()
        self.assertEqual(body["total"], 3)

        self.assertEqual(self.get(TRANSACOES, auth=bearer(uuid.uuid4())).json()["total"], 0)
