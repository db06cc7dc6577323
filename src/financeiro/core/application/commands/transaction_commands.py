from dataclasses import dataclass

from clinica_core.core.application.cqrs import CommandDTO
from financeiro.core.application.dtos.transaction_dto import TransactionDTO, TransactionUpdateDTO


@dataclass(frozen=True)
class CreateTransactionCommand(CommandDTO):
    medico_id: str
    payload: TransactionDTO

@dataclass(frozen=True)
class UpdateTransactionCommand(CommandDTO):
    id: str
    medico_id: str
    payload: TransactionUpdateDTO

@dataclass(frozen=True)
class DeleteTransactionCommand(CommandDTO):
    id: str
    medico_id: str
