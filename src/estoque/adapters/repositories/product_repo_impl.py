from django.db.models import F, Q

from clinica_core.core.application.cqrs import PagedResult
from estoque.core.domain.entities.product_entity import ProductEntity
from estoque.core.domain.repositories.product_repository import ProductRepository
from plugins.django_interface.models import Product as ProductModel

_EDITABLE = {
    "tipo_produto",
    "nome_produto",
    "principio_ativo",
    "codigo_barras",
    "numero_registro_anvisa",
    "preco_venda",
    "custo_aquisicao",
    "estoque_minimo",
    "localizacao_estoque",
}


class ProductRepoImpl(ProductRepository):
    def find_by_id(self, produto_id: str, medico_id: str) -> ProductEntity | None:
        m = ProductModel.objects.filter(id=produto_id, medico_id=medico_id).first()
        return ProductEntity.from_model(m) if m else None

    def update(self, produto_id: str, medico_id: str, changes: dict) -> ProductEntity | None:
        m = ProductModel.objects.filter(id=produto_id, medico_id=medico_id).first()
        if m is None:
            return None
        fields = [k for k in changes if k in _EDITABLE]
        for k in fields:
            setattr(m, k, changes[k])
        if fields:
            m.save(update_fields=[*fields, "updated_at"])
        return ProductEntity.from_model(m)

    def delete(self, produto_id: str, medico_id: str) -> bool:
        deleted, _ = ProductModel.objects.filter(id=produto_id, medico_id=medico_id).delete()
        return deleted > 0

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[ProductEntity]:
        qs = ProductModel.objects.filter(medico_id=filtros["medico_id"])

        search = (filtros.get("search") or "").strip()
        if search:
            qs = qs.filter(
                Q(nome_produto__icontains=search)
                | Q(principio_ativo__icontains=search)
                | Q(codigo_barras__icontains=search)
            )
        if filtros.get("tipo_produto"):
            qs = qs.filter(tipo_produto=filtros["tipo_produto"])
        if filtros.get("abaixo_minimo"):
            qs = qs.filter(estoque_minimo__gt=0, estoque_atual__lte=F("estoque_minimo"))

        total = qs.count()
        offset = (page - 1) * page_size
        items = [ProductEntity.from_model(m) for m in qs.order_by("nome_produto", "id")[offset : offset + page_size]]
        return PagedResult(items=items, total=total, page=page, page_size=page_size)
