from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ProviderCustomer:
    id: str
    name: str | None = None
    external_reference: str | None = None


@dataclass(frozen=True, slots=True)
class ProviderPixQrCode:
    encoded_image: str | None = None
    payload: str | None = None


@dataclass(frozen=True, slots=True)
class ProviderPayment:
    id: str
    status: str
    invoice_url: str | None = None
    bank_slip_url: str | None = None
    pix: ProviderPixQrCode | None = None

    @property
    def link(self) -> str | None:
        return self.invoice_url or self.bank_slip_url
