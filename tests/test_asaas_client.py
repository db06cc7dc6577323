import json
from datetime import date
from decimal import Decimal
from unittest.mock import patch

import requests
from django.test import SimpleTestCase
from urllib3.exceptions import MaxRetryError, NewConnectionError

from clinica_core.core.domain.exceptions import ProviderError
from financeiro.adapters.api_clients.asaas_api_client import AsaasAPIClient

BASE = "https://sandbox.asaas.com/api/v3"


def _response(status: int, body=None, reason: str = "OK") -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    resp._content = json.dumps(body).encode() if body is not None else b""
    resp.headers["Content-Type"] = "application/json"
    return resp


class AsaasAPIClientTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client_api = AsaasAPIClient("tok_medico", base_url=BASE, timeout=2, retries=1)

    def _patch(self, *responses):
        return patch.object(self.client_api.session, "request", side_effect=list(responses))

    def test_sends_token_and_json_headers(self) -> None:
        headers = self.client_api.session.headers
        self.assertEqual(headers["access_token"], "tok_medico")
        self.assertEqual(headers["Content-Type"], "application/json")
        self.assertIn("User-Agent", headers)

    def test_create_payment_body_with_pix_key(self) -> None:
        body = {
            "id": "pay_1",
            "status": "PENDING",
            "invoiceUrl": "https://sandbox.asaas.com/i/pay_1",
            "pix": {"encodedImage": "img", "payload": "000201"},
        }
        with self._patch(_response(200, body)) as req:
            payment = self.client_api.create_payment(
                customer="cus_1",
                billing_type="PIX",
                value=Decimal("150.50"),
                due_date=date(2030, 5, 10),
                description="Consulta",
                external_reference="ref-1",
                pix_key="chave-evp",
            )
        method, url = req.call_args.args
        sent = req.call_args.kwargs["json"]
        self.assertEqual((method, url), ("POST", f"{BASE}/payments"))
        self.assertEqual(req.call_args.kwargs["timeout"], 2)
        self.assertEqual(sent["value"], 150.5)
        self.assertEqual(sent["dueDate"], "2030-05-10")
        self.assertEqual(sent["externalReference"], "ref-1")
        self.assertEqual((sent["pixAddressKey"], sent["pixAddressKeyType"]), ("chave-evp", "EVP"))
        self.assertEqual(payment.link, "https://sandbox.asaas.com/i/pay_1")
        self.assertEqual(payment.pix.payload, "000201")

    def test_create_payment_without_pix_key(self) -> None:
        with self._patch(_response(200, {"id": "pay_2", "status": "PENDING", "bankSlipUrl": "https://b/2"})) as req:
            payment = self.client_api.create_payment(
                customer="cus_1",
                billing_type="BOLETO",
                value=Decimal("10"),
                due_date=date(2030, 1, 1),
                description="x",
                external_reference="ref-2",
            )
        self.assertNotIn("pixAddressKey", req.call_args.kwargs["json"])
        self.assertEqual(payment.link, "https://b/2")
        self.assertIsNone(payment.pix)

    def test_provider_error_descriptions_are_surfaced(self) -> None:
        error = {"errors": [{"code": "invalid_customer", "description": "Cliente inexistente"}]}
        with self._patch(_response(400, error, reason="Bad Request")):
            with self.assertRaises(ProviderError) as ctx:
                self.client_api.create_customer(name="Ana", external_reference="p1")
        self.assertEqual(ctx.exception.status, 400)
        self.assertEqual(ctx.exception.details, "Cliente inexistente")

    def test_non_json_error_uses_raw_text(self) -> None:
        resp = _response(404, reason="Not Found")
        resp._content = b"not found"
        with self._patch(resp):
            with self.assertRaises(ProviderError) as ctx:
                self.client_api.delete_payment("pay_x")
        self.assertEqual(ctx.exception.status, 404)
        self.assertEqual(ctx.exception.details, "not found")

    def test_network_failure(self) -> None:
        with self._patch(requests.Timeout("lento")):
            with self.assertRaises(ProviderError) as ctx:
                self.client_api.get_pix_qr_code("pay_1")
        self.assertIsNone(ctx.exception.status)

    def test_find_customer_by_reference(self) -> None:
        page = {"data": [{"id": "cus_9", "name": "Ana", "externalReference": "p1"}], "totalCount": 1}
        with self._patch(_response(200, page), _response(200, {"data": []})) as req:
            found = self.client_api.find_customer_by_reference("p1")
            missing = self.client_api.find_customer_by_reference("p2")
        self.assertEqual(found.id, "cus_9")
        self.assertIsNone(missing)
        self.assertEqual(req.call_args_list[0].kwargs["params"], {"externalReference": "p1", "limit": 1})

    def test_unexpected_payload(self) -> None:
        with self._patch(_response(200, {"status": "PENDING"})):
            with self.assertRaises(ProviderError):
                self.client_api.create_customer(name="Ana", external_reference="p1")


class ConnectionRetryTests(SimpleTestCase):
    def setUp(self) -> None:
        self.client_api = AsaasAPIClient("tok_medico", base_url=BASE, timeout=2, retries=3)

    def _create_payment(self):
        return self.client_api.create_payment(
            customer="cus_1",
            billing_type="BOLETO",
            value=Decimal("10"),
            due_date=date(2030, 1, 1),
            description="x",
            external_reference="ref-3",
        )

    def test_post_aborted_after_send_is_not_repeated(self) -> None:
        aborted = requests.ConnectionError("('Connection aborted.', RemoteDisconnected('closed'))")
        ok = _response(200, {"id": "pay_3", "status": "PENDING", "bankSlipUrl": "https://b/3"})
        with patch.object(self.client_api.session, "request", side_effect=[aborted, ok]) as req:
            with self.assertRaises(ProviderError) as ctx:
                self._create_payment()
        self.assertEqual(req.call_count, 1)
        self.assertIsNone(ctx.exception.status)

    def test_post_is_repeated_when_connection_never_opened(self) -> None:
        refused = requests.ConnectionError(
            MaxRetryError(None, f"{BASE}/payments", NewConnectionError(None, "Connection refused"))
        )
        ok = _response(200, {"id": "pay_4", "status": "PENDING", "bankSlipUrl": "https://b/4"})
        with patch.object(self.client_api.session, "request", side_effect=[refused, ok]) as req:
            payment = self._create_payment()
        self.assertEqual(req.call_count, 2)
        self.assertEqual(payment.id, "pay_4")

    def test_get_is_repeated_after_aborted_connection(self) -> None:
        aborted = requests.ConnectionError("('Connection aborted.', RemoteDisconnected('closed'))")
        page = _response(200, {"data": [{"id": "cus_9", "name": "Ana", "externalReference": "p1"}]})
        with patch.object(self.client_api.session, "request", side_effect=[aborted, page]) as req:
            found = self.client_api.find_customer_by_reference("p1")
        self.assertEqual(req.call_count, 2)
        self.assertEqual(found.id, "cus_9")
