"""Autenticação JWT, isolamento por médico e envelope de erro."""

import uuid
from datetime import UTC, datetime, timedelta

import jwt
from django.test import TestCase

from clinica_core.adapters.security.jwt_authentication import medico_id_from_claims
from clinica_core.adapters.security.jwt_service import JWTService
from config import settings
from tests.helpers.api import PACIENTES, PRODUTOS, ApiTestCase, bearer


class ClaimsTests(TestCase):
    def test_medico_id_prefers_user_metadata(self) -> None:
        payload = {"sub": "u1", "medico_id": "m2", "user_metadata": {"medico_id": "m1"}}
        self.assertEqual(medico_id_from_claims(payload), "m1")

    def test_medico_id_falls_back_to_claim_then_sub(self) -> None:
        self.assertEqual(medico_id_from_claims({"sub": "u1", "medico_id": "m2"}), "m2")
        self.assertEqual(medico_id_from_claims({"sub": "u1"}), "u1")

    def test_token_roundtrip_keeps_metadata(self) -> None:
        token = JWTService.create_token(subject="abc", expires_in=60, medico_id="m-9")
        payload = JWTService.decode_token(token)
        self.assertEqual(payload["sub"], "abc")
        self.assertEqual(payload["user_metadata"]["medico_id"], "m-9")


class AuthEndpointTests(ApiTestCase):
    def test_health_check_needs_no_token(self) -> None:
        resp = self.client.get("/api/healthz/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok"})

    def test_missing_token_is_401_with_envelope(self) -> None:
        resp = self.client.get(PRODUTOS)
        self.assertEqual(resp.status_code, 401)
        self.assertIn("error", resp.json())
        self.assertEqual(resp["WWW-Authenticate"], "Bearer")

    def test_expired_token_is_401(self) -> None:
        now = datetime.now(UTC)
        token = jwt.encode(
            {"sub": "x", "iat": now - timedelta(hours=2), "exp": now - timedelta(hours=1)},
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )
        resp = self.get(PRODUTOS, auth=f"Bearer {token}")
        self.assertEqual(resp.status_code, 401)

    def test_token_signed_with_other_secret_is_401(self) -> None:
        token = jwt.encode({"sub": "x"}, "outro-segredo", algorithm="HS256")
        resp = self.get(PRODUTOS, auth=f"Bearer {token}")
        self.assertEqual(resp.status_code, 401)

    def test_token_without_sub_is_401(self) -> None:
        token = jwt.encode({"medico_id": str(uuid.uuid4())}, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)
        resp = self.get(PRODUTOS, auth=f"Bearer {token}")
        self.assertEqual(resp.status_code, 401)

    def test_resources_of_other_tenant_are_404(self) -> None:
        other = uuid.uuid4()
        patient = self.make_patient(medico_id=other)
        resp = self.get(f"{PACIENTES}/{patient.id}")
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"], "Paciente não encontrado")

        resp = self.get(f"{PACIENTES}/{patient.id}", auth=bearer(other))
        self.assertEqual(resp.status_code, 200)

    def test_medico_id_in_body_is_ignored(self) -> None:
        other = uuid.uuid4()
        resp = self.post(PACIENTES, {"nome_completo": "João", "medico_id": str(other)})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["medico_id"], str(self.medico_id))


class RequestIdTests(TestCase):
    def test_request_id_is_generated_or_echoed(self) -> None:
        self.assertTrue(self.client.get("/api/healthz/")["X-Request-ID"])
        resp = self.client.get("/api/healthz/", HTTP_X_REQUEST_ID="req-123")
        self.assertEqual(resp["X-Request-ID"], "req-123")
