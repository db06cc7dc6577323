import uuid
from datetime import date

from pydantic import BaseModel, Field


class LotDTO(BaseModel):
    produto_id: uuid.UUID
    data_validade: date
    quantidade_lote: int = Field(gt=0)
    numero_lote: str | None = Field(default=None, max_length=64)
    data_entrada: date | None = None


class LotUpdateDTO(BaseModel):
    produto_id: uuid.UUID | None = None
    data_validade: date | None = None
    quantidade_lote: int | None = Field(default=None, ge=0)
    numero_lote: str | None = Field(default=None, max_length=64)
    data_entrada: date | None = None
