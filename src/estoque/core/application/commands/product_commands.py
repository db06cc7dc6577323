from dataclasses import dataclass

from clinica_core.core.application.cqrs import CommandDTO
from estoque.core.application.dtos.product_dto import ProductDTO, ProductUpdateDTO


@dataclass(frozen=True)
class CreateProductCommand(CommandDTO):
    medico_id: str
    payload: ProductDTO

@dataclass(frozen=True)
class UpdateProductCommand(CommandDTO):
    id: str
    medico_id: str
    payload: ProductUpdateDTO

@dataclass(frozen=True)
class DeleteProductCommand(CommandDTO):
    id: str
    medico_id: str
