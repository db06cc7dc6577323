"""
Gateway em memória para os testes do financeiro.

Substitui `asaas_client_factory` no container; nada sai para a rede.
"""
from __future__ import annotations

import itertools

from dependency_injector import providers

from clinica_core.core.domain.exceptions import ProviderError
from financeiro.adapters.config import composition_root as financeiro_root
from financeiro.core.domain.entities.provider_payment import ProviderCustomer, ProviderPayment, ProviderPixQrCode
from financeiro.core.domain.repositories.payment_gateway import PaymentGateway

PIX_PAYLOAD = "00020126580014br.gov.bcb.pix0136chave-evp-teste"
PIX_IMAGE = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAAB"


class FakeGateway(PaymentGateway):
    def __init__(self) -> None:
        self._seq = itertools.count(1)
        self.tokens: list[str] = []
        self.customers: dict[str, ProviderCustomer] = {}
        self.payments: dict[str, dict] = {}
        self.deleted: list[str] = []
        self.created_customers: list[dict] = []
        # falhas programáveis
        self.fail_create_payment: ProviderError | None = None
        self.fail_delete: ProviderError | None = None
        self.fail_qr: ProviderError | None = None
        self.inline_pix = False

    # usado como provider: factory(access_token=...)
    def bind(self, access_token: str) -> FakeGateway:
        self.tokens.append(access_token)
        return self

    def find_customer_by_reference(self, external_reference: str) -> ProviderCustomer | None:
        return self.customers.get(external_reference)

    def create_customer(self, *, name, external_reference, email=None, mobile_phone=None, cpf_cnpj=None):
        customer = ProviderCustomer(id=f"cus_{next(self._seq):06d}", name=name, external_reference=external_reference)
        self.customers[external_reference] = customer
        self.created_customers.append(
            {"name": name, "externalReference": external_reference, "email": email, "cpfCnpj": cpf_cnpj}
        )
        return customer

    def create_payment(self, *, customer, billing_type, value, due_date, description, external_reference, pix_key=None):
        if self.fail_create_payment is not None:
            raise self.fail_create_payment
        pay_id = f"pay_{next(self._seq):06d}"
        self.payments[pay_id] = {
            "customer": customer,
            "billingType": billing_type,
            "value": value,
            "dueDate": due_date,
            "description": description,
            "externalReference": external_reference,
            "pixAddressKey": pix_key,
        }
        pix = ProviderPixQrCode(encoded_image=PIX_IMAGE, payload=PIX_PAYLOAD) if (pix_key and self.inline_pix) else None
        return ProviderPayment(
            id=pay_id,
            status="PENDING",
            invoice_url=f"https://sandbox.asaas.com/i/{pay_id}",
            pix=pix,
        )

    def get_pix_qr_code(self, payment_id: str) -> ProviderPixQrCode:
        if self.fail_qr is not None:
            raise self.fail_qr
        return ProviderPixQrCode(encoded_image=PIX_IMAGE, payload=PIX_PAYLOAD)

    def delete_payment(self, payment_id: str) -> None:
        if self.fail_delete is not None:
            raise self.fail_delete
        self.deleted.append(payment_id)


def install_fake_gateway(testcase) -> FakeGateway:
    """Troca o cliente Asaas do container pelo fake até o fim do teste."""
    fake = FakeGateway()
    factory = financeiro_root.container.asaas_client_factory
    factory.override(providers.Callable(fake.bind))
    testcase.addCleanup(factory.reset_override)
    return fake
