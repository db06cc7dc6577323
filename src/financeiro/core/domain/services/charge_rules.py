"""
Estados da cobrança e traduções de/para o Asaas.

O status só é alterado pelo webhook; a única regra de transição é esta:

    PENDENTE → PAGO | VENCIDO | CANCELADO
    VENCIDO  → PAGO | CANCELADO
    PAGO     → CANCELADO   (estorno)
    CANCELADO é final; nada volta para PENDENTE.
"""
from __future__ import annotations

from enum import Enum
from typing import assert_never

from clinica_core.core.domain.exceptions import InvalidRequestError


class ChargeStatus(str, Enum):
    PENDENTE = "PENDENTE"
    PAGO = "PAGO"
    VENCIDO = "VENCIDO"
    CANCELADO = "CANCELADO"


class BillingMethod(str, Enum):
    PIX = "PIX"
    BOLETO = "BOLETO"
    CREDIT_CARD = "CREDIT_CARD"


_METHOD_ALIASES = {"CARTAO_CREDITO": BillingMethod.CREDIT_CARD}

_TRANSITIONS: dict[ChargeStatus, frozenset[ChargeStatus]] = {
    ChargeStatus.PENDENTE: frozenset({ChargeStatus.PAGO, ChargeStatus.VENCIDO, ChargeStatus.CANCELADO}),
    ChargeStatus.VENCIDO: frozenset({ChargeStatus.PAGO, ChargeStatus.CANCELADO}),
    ChargeStatus.PAGO: frozenset({ChargeStatus.CANCELADO}),
    ChargeStatus.CANCELADO: frozenset(),
}

REGENERABLE = frozenset({ChargeStatus.PENDENTE, ChargeStatus.VENCIDO})


def parse_billing_method(value: str) -> BillingMethod:
    raw = (value or "").strip().upper()
    if raw in _METHOD_ALIASES:
        return _METHOD_ALIASES[raw]
    try:
        return BillingMethod(raw)
    except ValueError:
        raise InvalidRequestError(
            "Método de pagamento inválido",
            "Use PIX, BOLETO ou CREDIT_CARD",
        ) from None


def can_transition(current: ChargeStatus, target: ChargeStatus) -> bool:
    return target in _TRANSITIONS[current]


def status_from_provider(provider_status: str | None) -> ChargeStatus:
    """Status do pagamento no Asaas → status local."""
    match (provider_status or "").upper():
        case "RECEIVED" | "CONFIRMED" | "RECEIVED_IN_CASH":
            return ChargeStatus.PAGO
        case "OVERDUE":
            return ChargeStatus.VENCIDO
        case "REFUNDED" | "REFUND_REQUESTED" | "DELETED" | "CANCELED":
            return ChargeStatus.CANCELADO
        case _:
            return ChargeStatus.PENDENTE


class WebhookEvent(str, Enum):
    PAYMENT_RECEIVED = "PAYMENT_RECEIVED"
    PAYMENT_CONFIRMED = "PAYMENT_CONFIRMED"
    PAYMENT_CONFIRMED_BY_BANK = "PAYMENT_CONFIRMED_BY_BANK"
    PAYMENT_OVERDUE = "PAYMENT_OVERDUE"
    PAYMENT_CANCELED = "PAYMENT_CANCELED"
    PAYMENT_DELETED = "PAYMENT_DELETED"
    PAYMENT_REFUNDED = "PAYMENT_REFUNDED"


def target_status(event: WebhookEvent) -> ChargeStatus:
    match event:
        case WebhookEvent.PAYMENT_RECEIVED | WebhookEvent.PAYMENT_CONFIRMED | WebhookEvent.PAYMENT_CONFIRMED_BY_BANK:
            return ChargeStatus.PAGO
        case WebhookEvent.PAYMENT_OVERDUE:
            return ChargeStatus.VENCIDO
        case WebhookEvent.PAYMENT_CANCELED | WebhookEvent.PAYMENT_DELETED | WebhookEvent.PAYMENT_REFUNDED:
            return ChargeStatus.CANCELADO
        case _:
            assert_never(event)


def parse_webhook_event(value: str | None) -> WebhookEvent | None:
    """None para eventos que não mexem em cobrança."""
    try:
        return WebhookEvent(value)
    except ValueError:
        return None
