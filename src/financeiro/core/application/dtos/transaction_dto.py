import uuid
from datetime import date
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

TransactionType = Literal["RECEITA", "DESPESA"]


class TransactionDTO(BaseModel):
    tipo_transacao: TransactionType
    descricao: str = Field(min_length=1, max_length=500)
    valor: Decimal = Field(gt=0, max_digits=12, decimal_places=2)
    data_transacao: date
    categoria: str | None = Field(default=None, max_length=100)
    meio_pagamento: str | None = Field(default=None, max_length=50)
    cobranca_id: uuid.UUID | None = None


class TransactionUpdateDTO(BaseModel):
    tipo_transacao: TransactionType | None = None
    descricao: str | None = Field(default=None, min_length=1, max_length=500)
    valor: Decimal | None = Field(default=None, gt=0, max_digits=12, decimal_places=2)
    data_transacao: date | None = None
    categoria: str | None = Field(default=None, max_length=100)
    meio_pagamento: str | None = Field(default=None, max_length=50)
    cobranca_id: uuid.UUID | None = None
