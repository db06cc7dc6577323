"""
Taxonomia de erros da aplicação.

Cada exceção carrega o status HTTP que a camada de interface deve devolver,
uma mensagem curta (`error`) e detalhes opcionais (`details`).
"""
from __future__ import annotations

from http import HTTPStatus


class ClinicaError(Exception):
    """Classe base para todas as exceções de domínio."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message: str = "Erro interno do servidor"

    def __init__(self, message: str | None = None, details: str | None = None) -> None:
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict[str, str]:
        payload = {"error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidRequestError(ClinicaError):
    """Campo obrigatório ausente, valor inválido ou enum desconhecido."""
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Dados inválidos"


class AuthenticationError(ClinicaError):
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Não autorizado"


class InvalidSignatureError(AuthenticationError):
    """Assinatura do webhook ausente ou inválida."""
    default_message = "Assinatura do webhook inválida"


class AccessDeniedError(ClinicaError):
    status_code = HTTPStatus.FORBIDDEN
    default_message = "Acesso negado"


class ProviderNotConfiguredError(AccessDeniedError):
    """O médico ainda não cadastrou (ou não é possível ler) o token do gateway."""
    default_message = "Token Asaas não configurado para este médico"


class ResourceNotFoundError(ClinicaError):
    """
    Registro inexistente ou pertencente a outro médico.
    Os dois casos são indistinguíveis para quem chama.
    """
    status_code = HTTPStatus.NOT_FOUND
    default_message = "Registro não encontrado"


class ConflictError(ClinicaError):
    status_code = HTTPStatus.CONFLICT
    default_message = "Conflito com o estado atual do registro"


class InsufficientStockError(ConflictError):
    default_message = "Estoque insuficiente"


class ProviderError(ClinicaError):
    """
    Falha ao falar com o gateway de pagamentos.
    `details` traz o texto de erro devolvido pelo provedor.
    """
    default_message = "Erro no provedor de pagamentos"

    def __init__(
        self,
        message: str | None = None,
        details: str | None = None,
        *,
        status: int | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status = status


class PartialFailureError(ClinicaError):
    """
    O efeito externo aconteceu (ex.: cobrança criada no Asaas) mas a escrita
    local falhou e a compensação também. O caso fica registrado para
    reconciliação manual ou pelo job `retry_reconciliations`.
    """
    default_message = "Falha parcial: operação pendente de reconciliação"

    def __init__(
        self,
        message: str | None = None,
        details: str | None = None,
        *,
        reconciliation_id: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.reconciliation_id = reconciliation_id

    def to_payload(self) -> dict[str, str]:
        payload = super().to_payload()
        if self.reconciliation_id:
            payload["reconciliation_id"] = self.reconciliation_id
        return payload
