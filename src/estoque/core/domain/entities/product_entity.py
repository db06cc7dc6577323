from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from clinica_core.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class ProductEntity(EntityMixin):
    id: uuid.UUID
    medico_id: uuid.UUID
    nome_produto: str
    preco_venda: Decimal
    custo_aquisicao: Decimal
    tipo_produto: str = "Outro"
    principio_ativo: str | None = None
    codigo_barras: str | None = None
    numero_registro_anvisa: str | None = None
    estoque_atual: int = 0
    estoque_minimo: int = 0
    localizacao_estoque: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def abaixo_do_minimo(self) -> bool:
        return self.estoque_minimo > 0 and self.estoque_atual <= self.estoque_minimo
