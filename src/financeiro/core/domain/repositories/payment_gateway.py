from abc import ABC, abstractmethod
from collections.abc import Callable

from financeiro.core.domain.entities.provider_payment import ProviderCustomer, ProviderPayment, ProviderPixQrCode


class PaymentGateway(ABC):
    """Porta para o provedor de pagamentos, já autenticada com o token do médico."""

    @abstractmethod
    def find_customer_by_reference(self, external_reference: str) -> ProviderCustomer | None:
        ...

    @abstractmethod
    def create_customer(
        self,
        *,
        name: str,
        external_reference: str,
        email: str | None = None,
        mobile_phone: str | None = None,
        cpf_cnpj: str | None = None,
    ) -> ProviderCustomer:
        ...

    @abstractmethod
    def create_payment(
        self,
        *,
        customer: str,
        billing_type: str,
        value,
        due_date,
        description: str,
        external_reference: str,
        pix_key: str | None = None,
    ) -> ProviderPayment:
        ...

    @abstractmethod
    def get_pix_qr_code(self, payment_id: str) -> ProviderPixQrCode:
        ...

    @abstractmethod
    def delete_payment(self, payment_id: str) -> None:
        ...


# access_token → gateway autenticado
GatewayFactory = Callable[..., PaymentGateway]
