"""
Regras do livro-razão de estoque.

ENTRADA soma, SAIDA subtrai, AJUSTE aplica a quantidade com o próprio sinal.
O saldo do produto nunca fica negativo e uma SAIDA de lote nunca
consome mais do que o lote tem.
"""
from __future__ import annotations

from enum import Enum
from typing import assert_never

from clinica_core.adapters.observability.metrics import STOCK_REJECTIONS
from clinica_core.core.domain.exceptions import InsufficientStockError, InvalidRequestError


class MovementKind(str, Enum):
    ENTRADA = "ENTRADA"
    SAIDA = "SAIDA"
    AJUSTE = "AJUSTE"


def check_quantity(kind: MovementKind, quantidade: int) -> None:
    if isinstance(quantidade, bool) or not isinstance(quantidade, int):
        raise InvalidRequestError("Quantidade inválida", "quantidade deve ser um número inteiro")
    if kind is MovementKind.AJUSTE:
        if quantidade == 0:
            raise InvalidRequestError("Quantidade inválida", "AJUSTE exige quantidade diferente de zero")
    elif quantidade <= 0:
        raise InvalidRequestError("Quantidade inválida", f"{kind.value} exige quantidade positiva")


def signed_delta(kind: MovementKind, quantidade: int) -> int:
    match kind:
        case MovementKind.ENTRADA:
            return quantidade
        case MovementKind.SAIDA:
            return -quantidade
        case MovementKind.AJUSTE:
            return quantidade
        case _:
            assert_never(kind)


def apply_delta(saldo_atual: int, delta: int) -> int:
    novo = saldo_atual + delta
    if novo < 0:
        STOCK_REJECTIONS.labels("saldo").inc()
        raise InsufficientStockError(
            details=f"Saldo atual {saldo_atual}, movimentação de {delta} deixaria o estoque negativo",
        )
    return novo


def withdraw_from_lot(quantidade_lote: int, quantidade: int) -> int:
    if quantidade > quantidade_lote:
        STOCK_REJECTIONS.labels("lote").inc()
        raise InsufficientStockError(
            "Quantidade insuficiente no lote",
            f"Lote possui {quantidade_lote}, solicitado {quantidade}",
        )
    return quantidade_lote - quantidade
