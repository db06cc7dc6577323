from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

ProductType = Literal["Medicamento", "Insumo", "Outro"]


class ProductDTO(BaseModel):
    nome_produto: str = Field(min_length=1, max_length=200)
    preco_venda: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    custo_aquisicao: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    tipo_produto: ProductType = "Outro"
    principio_ativo: str | None = None
    codigo_barras: str | None = Field(default=None, max_length=64)
    numero_registro_anvisa: str | None = Field(default=None, max_length=64)
    estoque_atual: int = Field(default=0, ge=0)
    estoque_minimo: int = Field(default=0, ge=0)
    localizacao_estoque: str | None = Field(default=None, max_length=120)


class ProductUpdateDTO(BaseModel):
    """`estoque_atual` não é aceito: o saldo só muda por movimentação."""
    nome_produto: str | None = Field(default=None, min_length=1, max_length=200)
    preco_venda: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    custo_aquisicao: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    tipo_produto: ProductType | None = None
    principio_ativo: str | None = None
    codigo_barras: str | None = Field(default=None, max_length=64)
    numero_registro_anvisa: str | None = Field(default=None, max_length=64)
    estoque_minimo: int | None = Field(default=None, ge=0)
    localizacao_estoque: str | None = Field(default=None, max_length=120)
