from __future__ import annotations

import json
import uuid

from django.test import TestCase

from clinica_core.adapters.security.jwt_service import JWTService
from plugins.django_interface.models import Patient, Product

API = "/api"
PRODUTOS = f"{API}/estoque-produtos-management/produtos"
LOTES = f"{API}/estoque-movimentacoes-lotes-management/lotes"
MOVIMENTACOES = f"{API}/estoque-movimentacoes-lotes-management/movimentacoes"
COBRANCAS = f"{API}/financeiro-management/cobrancas"
TRANSACOES = f"{API}/financeiro-management/transacoes"
PACIENTES = f"{API}/crm-pacientes-management/pacientes"
CONFIG_ASAAS = f"{API}/configuracoes/asaas"
WEBHOOK = f"{API}/financeiro-webhook-handler"


def bearer(medico_id: uuid.UUID | str) -> str:
    token = JWTService.create_token(subject=str(uuid.uuid4()), expires_in=600, medico_id=str(medico_id))
    return f"Bearer {token}"


class ApiTestCase(TestCase):
    """TestCase com um médico autenticado e atalhos JSON."""

    def setUp(self) -> None:
        super().setUp()
        self.medico_id = uuid.uuid4()
        self.auth = bearer(self.medico_id)

    def _call(self, method: str, url: str, body=None, auth: str | None = None):
        kwargs = {"HTTP_AUTHORIZATION": auth or self.auth}
        if body is not None:
            kwargs["data"] = json.dumps(body, default=str)
            kwargs["content_type"] = "application/json"
        return getattr(self.client, method)(url, **kwargs)

    def get(self, url, auth=None):
        return self._call("get", url, auth=auth)

    def post(self, url, body=None, auth=None):
        return self._call("post", url, body if body is not None else {}, auth=auth)

    def put(self, url, body, auth=None):
        return self._call("put", url, body, auth=auth)

    def delete(self, url, auth=None):
        return self._call("delete", url, auth=auth)

    # fixtures ------------------------------------------------------------------------
    def make_patient(self, medico_id=None, **extra) -> Patient:
        data = {"nome_completo": "Maria da Silva", "cpf": "12345678909", "email_paciente": "maria@example.com"}
        data.update(extra)
        return Patient.objects.create(medico_id=medico_id or self.medico_id, **data)

    def make_product(self, medico_id=None, **extra) -> Product:
        data = {"nome_produto": "Dipirona 500mg", "preco_venda": "12.50", "custo_aquisicao": "4.00"}
        data.update(extra)
        return Product.objects.create(medico_id=medico_id or self.medico_id, **data)
