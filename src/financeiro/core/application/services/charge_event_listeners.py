import structlog

from financeiro.core.domain.events.charge_events import ChargeCreatedEvent, ChargeStatusChangedEvent

logger = structlog.get_logger(__name__)


def log_charge_created(event: ChargeCreatedEvent) -> None:
    logger.info(
        "evento.cobranca_criada",
        charge_id=str(event.charge_id),
        medico_id=str(event.medico_id),
        metodo=event.metodo_pagamento,
    )


def log_status_change(event: ChargeStatusChangedEvent) -> None:
    logger.info(
        "evento.status_cobranca",
        charge_id=str(event.charge_id),
        medico_id=str(event.medico_id),
        de=event.old_status,
        para=event.new_status,
        origem=event.provider_event,
    )
