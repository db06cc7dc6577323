from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date

import structlog
from django.db import transaction

from clinica_core.core.domain.exceptions import (
    ClinicaError,
    ConflictError,
    PartialFailureError,
    ProviderError,
    ProviderNotConfiguredError,
    ResourceNotFoundError,
)
from clinica_core.core.domain.repositories.provider_credential_repository import ProviderCredentialRepository
from clinica_core.core.domain.repositories.tenant_settings_repository import TenantSettingsRepository
from clinica_core.core.domain.services.event_dispatcher import EventDispatcher
from financeiro.core.application.dtos.charge_dto import ChargeDTO, ChargeUpdateDTO
from financeiro.core.application.services.customer_service import CustomerService
from financeiro.core.domain.entities.charge_entity import ChargeEntity
from financeiro.core.domain.entities.provider_payment import ProviderPayment
from financeiro.core.domain.entities.reconciliation_entity import ReconciliationKind
from financeiro.core.domain.events.charge_events import ChargeCreatedEvent
from financeiro.core.domain.repositories.charge_repository import ChargeRepository
from financeiro.core.domain.repositories.payment_gateway import GatewayFactory, PaymentGateway
from financeiro.core.domain.repositories.reconciliation_repository import ReconciliationRepository
from financeiro.core.domain.services.charge_rules import (
    REGENERABLE,
    BillingMethod,
    ChargeStatus,
    parse_billing_method,
    status_from_provider,
)


logger = structlog.get_logger(__name__)

_NOT_FOUND = "Cobrança não encontrada"
_HTTP_NOT_FOUND = 404


class ChargeService:
    """
    Ciclo de vida da cobrança entre o banco local e o Asaas.

    Ordem das escritas: o pagamento é criado no provedor primeiro (com o id
    local já reservado como externalReference) e só então gravado aqui. Se a
    gravação local falhar, o pagamento é removido no provedor; se essa
    remoção também falhar, fica um registro de reconciliação pendente.
    """

    def __init__(
        self,
        charge_repo: ChargeRepository,
        settings_repo: TenantSettingsRepository,
        credential_repo: ProviderCredentialRepository,
        reconciliation_repo: ReconciliationRepository,
        customer_service: CustomerService,
        gateway_factory: GatewayFactory,
        dispatcher: EventDispatcher,
    ):
        self.charge_repo = charge_repo
        self.settings_repo = settings_repo
        self.credential_repo = credential_repo
        self.reconciliation_repo = reconciliation_repo
        self.customer_service = customer_service
        self.gateway_factory = gateway_factory
        self.dispatcher = dispatcher

    # ─────────────────────────── helpers ───────────────────────────
    def _gateway(self, medico_id) -> PaymentGateway:
        token = self.credential_repo.get_access_token(str(medico_id))
        if not token:
            raise ProviderNotConfiguredError()
        return self.gateway_factory(access_token=token)

    def _issue(self, gateway: PaymentGateway, charge: ChargeEntity, customer_id: str) -> tuple[ProviderPayment, dict]:
        """Cria o pagamento no provedor e devolve os campos locais derivados dele."""
        method = BillingMethod(charge.metodo_pagamento)
        pix_key = None
        if method is BillingMethod.PIX:
            pix_key = self.settings_repo.get(str(charge.medico_id)).asaas_pix_key

        payment = gateway.create_payment(
            customer=customer_id,
            billing_type=method.value,
            value=charge.valor,
            due_date=charge.data_vencimento,
            description=charge.descricao,
            external_reference=str(charge.id),
            pix_key=pix_key,
        )
        fields = {
            "asaas_charge_id": payment.id,
            "link_pagamento": payment.link,
            "status_cobranca": status_from_provider(payment.status).value,
            "pix_copia_cola": None,
            "qr_code_pix_base64": None,
        }
        if pix_key:
            qr = payment.pix
            if qr is None or not (qr.payload or qr.encoded_image):
                try:
                    qr = gateway.get_pix_qr_code(payment.id)
                except ProviderError as exc:
                    # o link continua válido; o QR pode ser obtido depois regerando o link
                    logger.warning("cobranca.qr_pix_indisponivel", payment_id=payment.id, error=exc.details)
                    qr = None
            if qr is not None:
                fields["pix_copia_cola"] = qr.payload
                fields["qr_code_pix_base64"] = qr.encoded_image
        return payment, fields

    def _compensate(self, gateway: PaymentGateway, medico_id, charge_id, payment_id: str, cause: Exception) -> str | None:
        """
        Remove no provedor um pagamento que não chegou a ser gravado localmente.
        Retorna o id da reconciliação aberta quando a remoção falha.
        """
        try:
            gateway.delete_payment(payment_id)
            logger.warning("cobranca.compensada", charge_id=str(charge_id), payment_id=payment_id, cause=str(cause))
            return None
        except ProviderError as exc:
            rec = self.reconciliation_repo.open(
                kind=ReconciliationKind.ORPHAN_PROVIDER_CHARGE.value,
                medico_id=str(medico_id),
                local_reference=str(charge_id),
                external_id=payment_id,
                error=f"{cause}; compensação falhou: {exc.details or exc.message}",
            )
            return str(rec.id)

    def _raise_after_compensation(self, rec_id: str | None, cause: Exception):
        if rec_id:
            raise PartialFailureError(
                details="Cobrança criada no Asaas mas não registrada localmente",
                reconciliation_id=rec_id,
            ) from cause
        raise ClinicaError("Falha ao salvar a cobrança", "A cobrança foi desfeita no Asaas") from cause

    # ─────────────────────────── criação ───────────────────────────
    def create(self, medico_id: str, payload: ChargeDTO) -> ChargeEntity:
        method = parse_billing_method(payload.metodo_pagamento)
        gateway = self._gateway(medico_id)
        customer_id = self.customer_service.ensure_customer(gateway, medico_id, str(payload.paciente_id))

        draft = ChargeEntity(
            id=uuid.uuid4(),
            medico_id=medico_id,
            paciente_id=payload.paciente_id,
            descricao=payload.descricao,
            valor=payload.valor,
            data_vencimento=payload.data_vencimento,
            metodo_pagamento=method.value,
        )
        payment, fields = self._issue(gateway, draft, customer_id)

        try:
            with transaction.atomic():
                saved = self.charge_repo.insert(replace(draft, **fields))
        except Exception as exc:  # noqa: BLE001
            logger.error("cobranca.insert_falhou", charge_id=str(draft.id), payment_id=payment.id, error=str(exc))
            rec_id = self._compensate(gateway, medico_id, draft.id, payment.id, exc)
            self._raise_after_compensation(rec_id, exc)

        logger.info(
            "cobranca.criada",
            charge_id=str(saved.id),
            medico_id=str(medico_id),
            payment_id=payment.id,
            metodo=method.value,
        )
        self.dispatcher.dispatch(
            ChargeCreatedEvent(
                charge_id=saved.id,
                medico_id=saved.medico_id,
                asaas_charge_id=payment.id,
                metodo_pagamento=method.value,
            )
        )
        return saved

    # ─────────────────────── regerar link ──────────────────────────
    def regenerate(self, medico_id: str, charge_id: str, nova_data_vencimento: date | None = None) -> ChargeEntity:
        current = self.charge_repo.find_by_id(charge_id, medico_id)
        if current is None:
            raise ResourceNotFoundError(_NOT_FOUND)
        if ChargeStatus(current.status_cobranca) not in REGENERABLE:
            raise ConflictError(
                "Cobrança não permite novo link",
                f"Status atual: {current.status_cobranca}",
            )

        gateway = self._gateway(medico_id)
        customer_id = self.customer_service.ensure_customer(gateway, medico_id, str(current.paciente_id))
        due = nova_data_vencimento or current.data_vencimento
        payment, fields = self._issue(gateway, replace(current, data_vencimento=due), customer_id)
        fields["data_vencimento"] = due

        try:
            with transaction.atomic():
                locked = self.charge_repo.lock_for_update(charge_id, medico_id)
                if (
                    locked is None
                    or ChargeStatus(locked.status_cobranca) not in REGENERABLE
                    or locked.asaas_charge_id != current.asaas_charge_id
                ):
                    raise ConflictError("Cobrança alterada durante a operação")
                updated = self.charge_repo.update_fields(charge_id, fields)
        except ConflictError as exc:
            self._compensate(gateway, medico_id, charge_id, payment.id, exc)
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error("cobranca.regerar_falhou", charge_id=str(charge_id), payment_id=payment.id, error=str(exc))
            rec_id = self._compensate(gateway, medico_id, charge_id, payment.id, exc)
            self._raise_after_compensation(rec_id, exc)

        old_payment = current.asaas_charge_id
        if old_payment and old_payment != payment.id:
            try:
                gateway.delete_payment(old_payment)
            except ProviderError as exc:
                self.reconciliation_repo.open(
                    kind=ReconciliationKind.STALE_PROVIDER_CHARGE.value,
                    medico_id=str(medico_id),
                    local_reference=str(charge_id),
                    external_id=old_payment,
                    error=exc.details or exc.message,
                )

        logger.info("cobranca.link_regerado", charge_id=str(charge_id), payment_id=payment.id, anterior=old_payment)
        return updated

    # ────────────────────── edição / exclusão ──────────────────────
    def update(self, medico_id: str, charge_id: str, payload: ChargeUpdateDTO) -> ChargeEntity:
        current = self.charge_repo.find_by_id(charge_id, medico_id)
        if current is None:
            raise ResourceNotFoundError(_NOT_FOUND)
        changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
        if "metodo_pagamento" in changes:
            changes["metodo_pagamento"] = parse_billing_method(changes["metodo_pagamento"]).value
        if not changes:
            return current
        return self.charge_repo.update_fields(charge_id, changes)

    def delete(self, medico_id: str, charge_id: str) -> None:
        current = self.charge_repo.find_by_id(charge_id, medico_id)
        if current is None:
            raise ResourceNotFoundError(_NOT_FOUND)
        if current.status_cobranca == ChargeStatus.PAGO.value:
            raise ConflictError("Cobrança paga não pode ser excluída")

        if current.asaas_charge_id and current.status_cobranca != ChargeStatus.CANCELADO.value:
            gateway = self._gateway(medico_id)
            try:
                gateway.delete_payment(current.asaas_charge_id)
            except ProviderError as exc:
                if exc.status != _HTTP_NOT_FOUND:
                    raise
                logger.info("cobranca.ja_removida_no_asaas", payment_id=current.asaas_charge_id)

        self.charge_repo.delete(charge_id, medico_id)
        logger.info("cobranca.removida", charge_id=str(charge_id), medico_id=str(medico_id))
