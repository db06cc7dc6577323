"""
Aplica no banco os eventos de pagamento enviados pelo Asaas.

Fluxo: autenticidade → parse → tradução do evento → correlação pela
referência externa (id local da cobrança) → transição de status sob trava
de linha → registro do id do evento (replays viram `duplicate`).
"""
from __future__ import annotations

import json
import uuid
from collections.abc import Mapping
from datetime import datetime, time
from typing import Any

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from clinica_core.adapters.observability.metrics import WEBHOOK_EVENTS
from clinica_core.adapters.security.webhook_signature import WebhookSignatureVerifier
from clinica_core.core.domain.exceptions import InvalidRequestError, ResourceNotFoundError
from clinica_core.core.domain.services.event_dispatcher import EventDispatcher
from financeiro.core.domain.events.charge_events import ChargeStatusChangedEvent
from financeiro.core.domain.repositories.charge_repository import ChargeRepository
from financeiro.core.domain.repositories.webhook_event_repository import WebhookEventRepository
from financeiro.core.domain.services.charge_rules import (
    ChargeStatus,
    can_transition,
    parse_webhook_event,
    target_status,
)

logger = structlog.get_logger(__name__)

_PAYMENT_DATE_KEYS = ("paymentDate", "clientPaymentDate", "confirmedDate")


def _section(payload: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    """Sub-objeto do payload; qualquer outra coisa (string, lista, null) vira vazio."""
    value = payload.get(key)
    return value if isinstance(value, Mapping) else {}


def _parse_moment(value: Any) -> datetime | None:
    if not value or not isinstance(value, str):
        return None
    try:
        moment = parse_datetime(value.replace(" ", "T", 1))
        if moment is None:
            day = parse_date(value[:10])
            if day is None:
                return None
            moment = datetime.combine(day, time.min)
    except ValueError:
        return None
    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def payment_timestamp(payload: Mapping[str, Any]) -> datetime:
    """Data do pagamento informada pelo provedor; relógio local só na falta dela."""
    payment = _section(payload, "payment")
    for key in _PAYMENT_DATE_KEYS:
        moment = _parse_moment(payment.get(key))
        if moment is not None:
            return moment
    return _parse_moment(payload.get("dateCreated")) or timezone.now()


def _result(event_name: str, outcome: str, status: str | None = None) -> dict[str, Any]:
    WEBHOOK_EVENTS.labels(event_name or "desconhecido", outcome).inc()
    body: dict[str, Any] = {"received": True, "outcome": outcome}
    if status:
        body["status"] = status
    return body


class WebhookReconciler:
    def __init__(
        self,
        verifier: WebhookSignatureVerifier,
        charge_repo: ChargeRepository,
        event_repo: WebhookEventRepository,
        dispatcher: EventDispatcher,
    ):
        self.verifier = verifier
        self.charge_repo = charge_repo
        self.event_repo = event_repo
        self.dispatcher = dispatcher

    def process(self, raw_body: bytes, headers: Mapping[str, str]) -> dict[str, Any]:
        scheme = self.verifier.verify(raw_body, headers)

        try:
            payload = json.loads(raw_body or b"")
        except (ValueError, UnicodeDecodeError):
            raise InvalidRequestError("JSON inválido") from None
        if not isinstance(payload, dict):
            raise InvalidRequestError("JSON inválido", "O corpo deve ser um objeto")

        event_name = str(payload.get("event") or "")
        event_id = payload.get("id")
        log = logger.bind(event=event_name, event_id=event_id, scheme=scheme)

        event = parse_webhook_event(event_name)
        if event is None:
            log.info("webhook.evento_ignorado")
            return _result(event_name, "ignored")

        payment = _section(payload, "payment")
        subscription = _section(payload, "subscription")
        reference = payment.get("externalReference") or subscription.get("externalReference")
        try:
            charge_id = uuid.UUID(str(reference))
        except (TypeError, ValueError):
            log.info("webhook.sem_referencia", reference=reference)
            return _result(event_name, "no_reference")

        changed: ChargeStatusChangedEvent | None = None
        try:
            with transaction.atomic():
                if event_id and self.event_repo.seen(str(event_id)):
                    log.info("webhook.replay")
                    return _result(event_name, "duplicate")

                charge = self.charge_repo.lock_for_update(str(charge_id))
                if charge is None:
                    log.warning("webhook.cobranca_desconhecida", charge_id=str(charge_id))
                    raise ResourceNotFoundError("Cobrança não encontrada")

                current = ChargeStatus(charge.status_cobranca)
                target = target_status(event)
                status = current
                payment_id = payment.get("id")

                if payment_id and charge.asaas_charge_id and payment_id != charge.asaas_charge_id:
                    outcome = "superseded"
                elif current is target:
                    outcome = "noop"
                elif not can_transition(current, target):
                    outcome = "rejected"
                else:
                    fields: dict[str, Any] = {"status_cobranca": target.value}
                    if target is ChargeStatus.PAGO and charge.data_pagamento is None:
                        fields["data_pagamento"] = payment_timestamp(payload)
                    self.charge_repo.update_fields(str(charge_id), fields)
                    status = target
                    outcome = "applied"
                    changed = ChargeStatusChangedEvent(
                        charge_id=charge.id,
                        medico_id=charge.medico_id,
                        old_status=current.value,
                        new_status=target.value,
                        provider_event=event_name,
                    )

                if event_id:
                    self.event_repo.record(
                        event_id=str(event_id),
                        event=event_name,
                        charge_id=str(charge_id),
                        outcome=outcome,
                    )
        except IntegrityError:
            # outra entrega do mesmo evento gravou primeiro
            log.info("webhook.replay_concorrente")
            return _result(event_name, "duplicate")

        log.info("webhook.processado", charge_id=str(charge_id), outcome=outcome, status=status.value)
        if changed is not None:
            self.dispatcher.dispatch(changed)
        return _result(event_name, outcome, status.value)
