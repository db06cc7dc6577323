import json
import uuid
from datetime import date
from decimal import Decimal

from django.test import TestCase, override_settings

from clinica_core.adapters.security.webhook_signature import sign
from plugins.django_interface.models import Charge, Patient, ProviderWebhookEvent
from tests.helpers.api import WEBHOOK

SECRET = "segredo-do-webhook"


@override_settings(ASAAS_WEBHOOK_SECRET=SECRET)
class ProviderWebhookTests(TestCase):
    def setUp(self) -> None:
        medico_id = uuid.uuid4()
        patient = Patient.objects.create(medico_id=medico_id, nome_completo="João Souza")
        self.charge = Charge.objects.create(
            medico_id=medico_id,
            paciente=patient,
            descricao="Consulta",
            valor=Decimal("200.00"),
            data_vencimento=date(2030, 1, 10),
            metodo_pagamento="PIX",
            asaas_charge_id="pay_abc123",
        )

    def _payload(self, event="PAYMENT_RECEIVED", event_id=None, **payment):
        data = {"id": "pay_abc123", "externalReference": str(self.charge.id), **payment}
        return {"id": event_id or f"evt_{uuid.uuid4().hex}", "event": event, "payment": data}

    def _send(self, payload, secret=SECRET, **headers):
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        if secret is not None and "HTTP_ASAAS_ACCESS_TOKEN" not in headers:
            headers["HTTP_X_WEBHOOK_SIGNATURE"] = sign(body, secret)
        return self.client.post(WEBHOOK, data=body, content_type="application/json", **headers)

    def _status(self) -> str:
        self.charge.refresh_from_db()
        return self.charge.status_cobranca

    def test_received_marks_paid_with_provider_date(self) -> None:
        resp = self._send(self._payload(paymentDate="2030-01-08"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"received": True, "outcome": "applied", "status": "PAGO"})
        self.assertEqual(self._status(), "PAGO")
        self.assertEqual(self.charge.data_pagamento.date(), date(2030, 1, 8))

    def test_payment_date_falls_back_to_client_date(self) -> None:
        self._send(self._payload("PAYMENT_CONFIRMED", clientPaymentDate="2030-01-05"))
        self.charge.refresh_from_db()
        self.assertEqual(self.charge.data_pagamento.date(), date(2030, 1, 5))

    def test_impossible_payment_date_falls_back_to_now(self) -> None:
        resp = self._send(self._payload(paymentDate="2030-13-45"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self._status(), "PAGO")
        self.assertIsNotNone(self.charge.data_pagamento)

    def test_overdue_then_received(self) -> None:
        self._send(self._payload("PAYMENT_OVERDUE"))
        self.assertEqual(self._status(), "VENCIDO")
        self._send(self._payload("PAYMENT_RECEIVED"))
        self.assertEqual(self._status(), "PAGO")
        self.assertIsNotNone(self.charge.data_pagamento)

    def test_refund_after_payment_cancels(self) -> None:
        self._send(self._payload("PAYMENT_RECEIVED"))
        self._send(self._payload("PAYMENT_REFUNDED"))
        self.assertEqual(self._status(), "CANCELADO")

    def test_illegal_transition_is_rejected(self) -> None:
        Charge.objects.filter(id=self.charge.id).update(status_cobranca="CANCELADO")
        resp = self._send(self._payload("PAYMENT_RECEIVED"))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["outcome"], "rejected")
        self.assertEqual(self._status(), "CANCELADO")

    def test_same_status_is_noop(self) -> None:
        Charge.objects.filter(id=self.charge.id).update(status_cobranca="VENCIDO")
        self.assertEqual(self._send(self._payload("PAYMENT_OVERDUE")).json()["outcome"], "noop")

    def test_replayed_event_is_duplicate(self) -> None:
        payload = self._payload("PAYMENT_OVERDUE", event_id="evt_1")
        self.assertEqual(self._send(payload).json()["outcome"], "applied")
        Charge.objects.filter(id=self.charge.id).update(status_cobranca="PENDENTE")

        self.assertEqual(self._send(payload).json()["outcome"], "duplicate")
        self.assertEqual(self._status(), "PENDENTE")
        self.assertEqual(ProviderWebhookEvent.objects.get(event_id="evt_1").outcome, "applied")

    def test_event_for_replaced_payment_is_superseded(self) -> None:
        payload = self._payload("PAYMENT_RECEIVED")
        payload["payment"]["id"] = "pay_antigo"
        self.assertEqual(self._send(payload).json()["outcome"], "superseded")
        self.assertEqual(self._status(), "PENDENTE")

    def test_unmapped_event_is_ignored(self) -> None:
        resp = self._send(self._payload("PAYMENT_CREATED"))
        self.assertEqual(resp.json(), {"received": True, "outcome": "ignored"})
        self.assertEqual(self._status(), "PENDENTE")

    def test_missing_reference(self) -> None:
        payload = self._payload()
        payload["payment"]["externalReference"] = "pedido-42"
        self.assertEqual(self._send(payload).json()["outcome"], "no_reference")

    def test_unknown_charge_is_404(self) -> None:
        payload = self._payload()
        payload["payment"]["externalReference"] = str(uuid.uuid4())
        self.assertEqual(self._send(payload).status_code, 404)

    def test_invalid_json_is_400(self) -> None:
        resp = self._send(b"{nao-e-json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "JSON inválido")

    def test_bad_signature_is_401(self) -> None:
        resp = self._send(self._payload(), secret="outro-segredo")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(self._status(), "PENDENTE")

    def test_unsigned_request_is_401(self) -> None:
        self.assertEqual(self._send(self._payload(), secret=None).status_code, 401)

    def test_asaas_token_header_is_accepted(self) -> None:
        resp = self._send(self._payload(), HTTP_ASAAS_ACCESS_TOKEN=SECRET)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self._status(), "PAGO")

    def test_wrong_asaas_token_is_401(self) -> None:
        self.assertEqual(self._send(self._payload(), HTTP_ASAAS_ACCESS_TOKEN="errado").status_code, 401)

    def test_non_ascii_signature_is_401(self) -> None:
        resp = self._send(self._payload(), secret=None, HTTP_X_WEBHOOK_SIGNATURE="sha256=é")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(self._status(), "PENDENTE")

    def test_non_ascii_asaas_token_is_401(self) -> None:
        self.assertEqual(self._send(self._payload(), HTTP_ASAAS_ACCESS_TOKEN="senhaç").status_code, 401)

    def test_payment_that_is_not_an_object_has_no_reference(self) -> None:
        resp = self._send({"id": "evt_str", "event": "PAYMENT_RECEIVED", "payment": "pay_abc123"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["outcome"], "no_reference")
        self.assertEqual(self._status(), "PENDENTE")

    def test_subscription_that_is_not_an_object_has_no_reference(self) -> None:
        resp = self._send({"event": "PAYMENT_OVERDUE", "payment": None, "subscription": ["sub_1"]})
        self.assertEqual(resp.json()["outcome"], "no_reference")

    @override_settings(ASAAS_WEBHOOK_SECRET="")
    def test_without_configured_secret_everything_is_refused(self) -> None:
        self.assertEqual(self._send(self._payload(), secret="").status_code, 401)
