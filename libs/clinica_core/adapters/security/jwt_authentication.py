import jwt
import structlog
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication

from clinica_core.adapters.security.jwt_service import JWTService

logger = structlog.get_logger(__name__)


class SimpleUser:
    """
    Representa um usuário mínimo compatível com DRF,
    usando somente os atributos necessários: id, medico_id, role e is_authenticated.
    """
    def __init__(self, id: str, medico_id: str, role: str | None = None):
        self.id = id
        self.medico_id = medico_id
        self.role = role
        self.is_authenticated = True

    def __str__(self):
        return f"<SimpleUser id={self.id} medico_id={self.medico_id} role={self.role}>"


def medico_id_from_claims(payload: dict) -> str | None:
    """user_metadata.medico_id → claim medico_id → sub."""
    metadata = payload.get("user_metadata") or {}
    return metadata.get("medico_id") or payload.get("medico_id") or payload.get("sub")


class JWTAuthentication(BaseAuthentication):
    """
    Lê o header Authorization: Bearer <token>,
    valida com o JWTService e retorna (user, token).
    O medico_id vem sempre do token verificado, nunca do corpo da requisição.
    """
    keyword = "Bearer"

    def authenticate(self, request):
        header = request.headers.get("Authorization", "")
        parts = header.split()

        if not header or parts[0].lower() != "bearer":
            return None
        if len(parts) != 2:  # noqa: PLR2004
            raise exceptions.AuthenticationFailed("Header Authorization malformado.")

        token = parts[1]
        try:
            payload = JWTService.decode_token(token)
        except jwt.PyJWTError as e:
            logger.info("auth.token_invalido", error=str(e))
            raise exceptions.AuthenticationFailed(f"Token inválido: {e}")  # noqa: B904

        user_id = payload.get("sub")
        if not user_id:
            raise exceptions.AuthenticationFailed("Token não contém o claim 'sub'.")

        user = SimpleUser(
            id=str(user_id),
            medico_id=str(medico_id_from_claims(payload)),
            role=payload.get("role"),
        )
        return (user, token)

    def authenticate_header(self, request):
        # faz o DRF responder 401 (e não 403) quando falta autenticação
        return self.keyword
