from __future__ import annotations

import time
from collections.abc import Callable
from decimal import Decimal
from typing import Any, TypeVar

import requests
import structlog
from pydantic import ValidationError

from clinica_core.adapters.api_clients.base_api_client import BaseAPIClient
from clinica_core.adapters.observability.metrics import PROVIDER_LATENCY, PROVIDER_REQUESTS
from clinica_core.core.domain.exceptions import ProviderError
from config import settings
from financeiro.core.application.dtos.asaas_dtos import (
    AsaasCustomerDTO,
    AsaasCustomerListDTO,
    AsaasErrorDTO,
    AsaasPaymentDTO,
    AsaasPixQrCodeDTO,
)
from financeiro.core.domain.entities.provider_payment import ProviderCustomer, ProviderPayment, ProviderPixQrCode
from financeiro.core.domain.repositories.payment_gateway import PaymentGateway

logger = structlog.get_logger(__name__)

R = TypeVar("R")


def _error_details(resp: requests.Response | None) -> str:
    """Texto de erro do Asaas (`errors[].description`) ou o corpo/status cru."""
    if resp is None:
        return "sem resposta do provedor"
    try:
        parsed = AsaasErrorDTO.model_validate(resp.json())
        descriptions = [e.description for e in parsed.errors if e.description]
        if descriptions:
            return "; ".join(descriptions)
    except (ValueError, ValidationError):
        pass
    return (resp.text or resp.reason or str(resp.status_code))[:500]


class AsaasAPIClient(BaseAPIClient, PaymentGateway):
    """
    Cliente da API v3 do Asaas autenticado com o token de um médico.

    Toda falha (HTTP não-2xx, rede, payload inesperado) sobe como
    `ProviderError` com o texto do provedor em `details`.
    """

    def __init__(
        self,
        access_token: str,
        *,
        base_url: str | None = None,
        timeout: float | None = None,
        retries: int | None = None,
    ) -> None:
        super().__init__(
            base_url=base_url or settings.ASAAS_API_BASE,
            default_headers={
                "Accept": "application/json",
                "Content-Type": "application/json",
                "User-Agent": settings.ASAAS_USER_AGENT,
                "access_token": access_token,
            },
            timeout=timeout if timeout is not None else settings.ASAAS_TIMEOUT,
            retries=retries if retries is not None else settings.ASAAS_RETRIES,
        )

    # ------------------------------------------------------------------ infra -------
    def _call(self, operation: str, fn: Callable[[], R]) -> R:
        start = time.perf_counter()
        try:
            result = fn()
        except requests.HTTPError as exc:
            PROVIDER_REQUESTS.labels(operation, "http_error").inc()
            status = exc.response.status_code if exc.response is not None else None
            details = _error_details(exc.response)
            logger.warning("asaas.erro_http", operation=operation, status=status, details=details)
            raise ProviderError(f"Erro no Asaas ({operation})", details, status=status) from exc
        except requests.RequestException as exc:
            PROVIDER_REQUESTS.labels(operation, "network_error").inc()
            logger.warning("asaas.erro_rede", operation=operation, error=str(exc))
            raise ProviderError(f"Falha de comunicação com o Asaas ({operation})", str(exc)) from exc
        except (ValueError, ValidationError) as exc:
            PROVIDER_REQUESTS.labels(operation, "invalid_payload").inc()
            logger.warning("asaas.resposta_invalida", operation=operation, error=str(exc))
            raise ProviderError(f"Resposta inesperada do Asaas ({operation})", str(exc)) from exc
        finally:
            PROVIDER_LATENCY.labels(operation).observe(time.perf_counter() - start)
        PROVIDER_REQUESTS.labels(operation, "ok").inc()
        return result

    # -------------------------------------------------------------- customers -------
    def find_customer_by_reference(self, external_reference: str) -> ProviderCustomer | None:
        page = self._call(
            "find_customer",
            lambda: self._get(
                "/customers",
                params={"externalReference": external_reference, "limit": 1},
                response_model=AsaasCustomerListDTO,
            ),
        )
        if page is None or not page.data:
            return None
        c = page.data[0]
        return ProviderCustomer(id=c.id, name=c.name, external_reference=c.externalReference)

    def create_customer(
        self,
        *,
        name: str,
        external_reference: str,
        email: str | None = None,
        mobile_phone: str | None = None,
        cpf_cnpj: str | None = None,
    ) -> ProviderCustomer:
        body: dict[str, Any] = {"name": name, "externalReference": external_reference}
        if email:
            body["email"] = email
        if mobile_phone:
            body["mobilePhone"] = mobile_phone
        if cpf_cnpj:
            body["cpfCnpj"] = cpf_cnpj
        c = self._call(
            "create_customer",
            lambda: self._post("/customers", json_body=body, response_model=AsaasCustomerDTO),
        )
        logger.info("asaas.cliente_criado", customer_id=c.id, external_reference=external_reference)
        return ProviderCustomer(id=c.id, name=c.name, external_reference=c.externalReference)

    # --------------------------------------------------------------- payments -------
    def create_payment(
        self,
        *,
        customer: str,
        billing_type: str,
        value: Decimal,
        due_date,
        description: str,
        external_reference: str,
        pix_key: str | None = None,
    ) -> ProviderPayment:
        body: dict[str, Any] = {
            "customer": customer,
            "billingType": billing_type,
            "value": float(value),
            "dueDate": due_date.isoformat() if hasattr(due_date, "isoformat") else str(due_date),
            "description": description,
            "externalReference": external_reference,
        }
        if pix_key:
            body["pixAddressKey"] = pix_key
            body["pixAddressKeyType"] = "EVP"

        p = self._call(
            "create_payment",
            lambda: self._post("/payments", json_body=body, response_model=AsaasPaymentDTO),
        )
        logger.info("asaas.pagamento_criado", payment_id=p.id, status=p.status, external_reference=external_reference)
        pix = ProviderPixQrCode(encoded_image=p.pix.encodedImage, payload=p.pix.payload) if p.pix else None
        return ProviderPayment(
            id=p.id,
            status=p.status,
            invoice_url=p.invoiceUrl,
            bank_slip_url=p.bankSlipUrl,
            pix=pix,
        )

    def get_pix_qr_code(self, payment_id: str) -> ProviderPixQrCode:
        qr = self._call(
            "get_pix_qr_code",
            lambda: self._get(f"/payments/{payment_id}/pixQrCode", response_model=AsaasPixQrCodeDTO),
        )
        return ProviderPixQrCode(encoded_image=qr.encodedImage, payload=qr.payload)

    def delete_payment(self, payment_id: str) -> None:
        self._call("delete_payment", lambda: self._delete(f"/payments/{payment_id}"))
        logger.info("asaas.pagamento_removido", payment_id=payment_id)
