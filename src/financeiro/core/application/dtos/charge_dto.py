import uuid
from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field


class ChargeDTO(BaseModel):
    paciente_id: uuid.UUID
    valor: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    data_vencimento: date
    descricao: str = Field(min_length=1, max_length=500)
    metodo_pagamento: str = Field(min_length=1)


class ChargeUpdateDTO(BaseModel):
    """O status não é editável: quem muda status é o webhook."""
    valor: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    data_vencimento: date | None = None
    descricao: str | None = Field(default=None, min_length=1, max_length=500)
    metodo_pagamento: str | None = None


class RegenerateLinkDTO(BaseModel):
    data_vencimento: date | None = None
