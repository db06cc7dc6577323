from datetime import UTC, datetime, timedelta

import jwt

from config import settings


class JWTService:
    """
    Serviço de criação e validação de tokens JWT.

    Os tokens de produção são emitidos pelo provedor de identidade; a
    criação aqui existe para ferramentas internas e testes.
    """

    @staticmethod
    def create_token(
        subject: str,
        expires_in: int,
        medico_id: str | None = None,
        role: str | None = None,
    ) -> str:
        """Gera um token JWT com claim 'sub', user_metadata.medico_id e expiração."""

        now = datetime.now(UTC)
        payload = {
            "sub": str(subject),
            "iat": now,
            "exp": now + timedelta(seconds=int(expires_in)),
        }
        if medico_id is not None:
            payload["user_metadata"] = {"medico_id": str(medico_id)}
        if role is not None:
            payload["role"] = role
        if settings.JWT_AUDIENCE:
            payload["aud"] = settings.JWT_AUDIENCE

        return jwt.encode(
            payload,
            settings.JWT_SECRET,
            algorithm=settings.JWT_ALGORITHM,
        )

    @staticmethod
    def decode_token(token: str) -> dict:
        """
        Decodifica e valida o token JWT, retornando o payload.
        Lança jwt.PyJWTError se inválido ou expirado.
        """
        audience = settings.JWT_AUDIENCE or None
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
            audience=audience,
            options={"verify_aud": audience is not None},
        )
