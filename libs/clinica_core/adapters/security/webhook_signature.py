from __future__ import annotations

import hashlib
import hmac
from collections.abc import Mapping

import structlog
from django.conf import settings

from clinica_core.core.domain.exceptions import InvalidSignatureError

logger = structlog.get_logger(__name__)

SIGNATURE_HEADER = "X-Webhook-Signature"
ASAAS_TOKEN_HEADER = "asaas-access-token"


def sign(body: bytes, secret: str) -> str:
    """Valor esperado no header de assinatura: `sha256=<hex>`."""
    digest = hmac.new(secret.encode(), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


class WebhookSignatureVerifier:
    """
    Autentica a origem do webhook com um segredo global.

    Aceita:
      • `X-Webhook-Signature: sha256=<HMAC-SHA256(corpo bruto)>`
      • `asaas-access-token: <segredo>` (token de autenticação do painel Asaas)

    Sem segredo configurado, recusa tudo. Sem `secret` explícito, usa
    `settings.ASAAS_WEBHOOK_SECRET` no momento da verificação.
    """

    def __init__(self, secret: str | None = None) -> None:
        self._explicit_secret = secret

    @property
    def _secret(self) -> str:
        if self._explicit_secret is not None:
            return self._explicit_secret
        return getattr(settings, "ASAAS_WEBHOOK_SECRET", "") or ""

    def verify(self, body: bytes, headers: Mapping[str, str]) -> str:
        """Retorna o esquema aceito ('hmac' ou 'token') ou lança InvalidSignatureError."""
        if not self._secret:
            logger.error("webhook.segredo_nao_configurado")
            raise InvalidSignatureError(details="Webhook sem segredo configurado no servidor")

        signature = headers.get(SIGNATURE_HEADER)
        if signature:
            expected = sign(body, self._secret)
            candidate = signature if signature.startswith("sha256=") else f"sha256={signature}"
            if hmac.compare_digest(expected.encode(), candidate.strip().encode("utf-8", "replace")):
                return "hmac"
            raise InvalidSignatureError()

        token = headers.get(ASAAS_TOKEN_HEADER)
        if token and hmac.compare_digest(token.encode("utf-8", "replace"), self._secret.encode()):
            return "token"

        raise InvalidSignatureError()
