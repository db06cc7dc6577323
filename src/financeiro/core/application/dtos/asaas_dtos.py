"""Payloads de resposta da API v3 do Asaas (somente os campos usados)."""
from __future__ import annotations

from pydantic import BaseModel


class AsaasCustomerDTO(BaseModel):
    id: str
    name: str | None = None
    email: str | None = None
    externalReference: str | None = None


class AsaasCustomerListDTO(BaseModel):
    data: list[AsaasCustomerDTO] = []
    totalCount: int = 0
    hasMore: bool = False


class AsaasPixQrCodeDTO(BaseModel):
    encodedImage: str | None = None
    payload: str | None = None
    expirationDate: str | None = None


class AsaasPaymentDTO(BaseModel):
    id: str
    status: str
    customer: str | None = None
    billingType: str | None = None
    value: float | None = None
    dueDate: str | None = None
    externalReference: str | None = None
    invoiceUrl: str | None = None
    bankSlipUrl: str | None = None
    pix: AsaasPixQrCodeDTO | None = None


class AsaasErrorItemDTO(BaseModel):
    code: str | None = None
    description: str | None = None


class AsaasErrorDTO(BaseModel):
    errors: list[AsaasErrorItemDTO] = []
