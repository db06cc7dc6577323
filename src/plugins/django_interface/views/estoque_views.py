# ╭────────────────────────────────────────────────────────────────────────────╮
# │  ViewSets REST – Estoque (produtos, lotes e movimentações)                 │
# │                                                                            │
# │  Toda alteração de saldo passa pelo livro de movimentações; os             │
# │  ViewSets só traduzem HTTP ⇄ comandos/queries.                             │
# ╰────────────────────────────────────────────────────────────────────────────╯
from __future__ import annotations

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from clinica_core.adapters.observability.decorators import track_http
from clinica_core.core.application.cqrs import CommandBusImpl, QueryBusImpl
from estoque.adapters.config.composition_root import container as estoque_container
from estoque.core.application.commands.lot_commands import CreateLotCommand, DeleteLotCommand, UpdateLotCommand
from estoque.core.application.commands.movement_commands import RecordMovementCommand
from estoque.core.application.commands.product_commands import (
    CreateProductCommand,
    DeleteProductCommand,
    UpdateProductCommand,
)
from estoque.core.application.dtos.lot_dto import LotDTO, LotUpdateDTO
from estoque.core.application.dtos.movement_dto import MovementDTO
from estoque.core.application.dtos.product_dto import ProductDTO, ProductUpdateDTO
from estoque.core.application.queries.stock_queries import (
    GetLotQuery,
    GetMovementQuery,
    GetProductBalanceQuery,
    GetProductQuery,
    ListLotsQuery,
    ListMovementsQuery,
    ListProductsQuery,
)
from plugins.django_interface.permissions import IsMedicoUser
from plugins.django_interface.serializers.estoque_serializers import (
    LotSerializer,
    MovementSerializer,
    ProductBalanceSerializer,
    ProductSerializer,
)
from plugins.django_interface.views.core_views import PaginationFilterMixin

estoque_command_bus: CommandBusImpl = estoque_container.command_bus()
estoque_query_bus: QueryBusImpl = estoque_container.query_bus()


def _owner(request) -> str:
    return str(request.user.medico_id)


# ───────────────────────────────────────────────────────────────────────────
class ProductViewSet(PaginationFilterMixin, viewsets.ViewSet):
    permission_classes = [IsMedicoUser]
    filter_fields = ("search", "tipo_produto", "abaixo_minimo")
    bool_filters = ("abaixo_minimo",)

    @track_http("ProductViewSet_list")
    def list(self, request):
        page, limit = self._pagination(request)
        res = estoque_query_bus.dispatch(
            ListProductsQuery(filtros=self._filters(request), page=page, page_size=limit)
        )
        return self._paged(res, ProductSerializer)

    @track_http("ProductViewSet_retrieve")
    def retrieve(self, request, pk=None):
        prod = estoque_query_bus.dispatch(GetProductQuery(filtros={"id": str(pk), "medico_id": _owner(request)}))
        return Response(ProductSerializer(prod).data)

    @track_http("ProductViewSet_create")
    def create(self, request):
        dto = ProductDTO(**self._body(request))
        prod = estoque_command_bus.dispatch(CreateProductCommand(medico_id=_owner(request), payload=dto))
        return Response(ProductSerializer(prod).data, status=status.HTTP_201_CREATED)

    @track_http("ProductViewSet_update")
    def update(self, request, pk=None):
        dto = ProductUpdateDTO(**self._body(request))
        prod = estoque_command_bus.dispatch(UpdateProductCommand(id=str(pk), medico_id=_owner(request), payload=dto))
        return Response(ProductSerializer(prod).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    @track_http("ProductViewSet_destroy")
    def destroy(self, request, pk=None):
        estoque_command_bus.dispatch(DeleteProductCommand(id=str(pk), medico_id=_owner(request)))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @track_http("ProductViewSet_saldo")
    @action(detail=True, methods=["get"], url_path="saldo")
    def saldo(self, request, pk=None):
        res = estoque_query_bus.dispatch(
            GetProductBalanceQuery(filtros={"id": str(pk), "medico_id": _owner(request)})
        )
        return Response(ProductBalanceSerializer(res).data)


# ───────────────────────────────────────────────────────────────────────────
class LotViewSet(PaginationFilterMixin, viewsets.ViewSet):
    permission_classes = [IsMedicoUser]
    filter_fields = ("produto_id", "vencimento_ate")

    @track_http("LotViewSet_list")
    def list(self, request):
        page, limit = self._pagination(request)
        res = estoque_query_bus.dispatch(ListLotsQuery(filtros=self._filters(request), page=page, page_size=limit))
        return self._paged(res, LotSerializer)

    @track_http("LotViewSet_retrieve")
    def retrieve(self, request, pk=None):
        lot = estoque_query_bus.dispatch(GetLotQuery(filtros={"id": str(pk), "medico_id": _owner(request)}))
        return Response(LotSerializer(lot).data)

    @track_http("LotViewSet_create")
    def create(self, request):
        dto = LotDTO(**self._body(request))
        lot = estoque_command_bus.dispatch(CreateLotCommand(medico_id=_owner(request), payload=dto))
        return Response(LotSerializer(lot).data, status=status.HTTP_201_CREATED)

    @track_http("LotViewSet_update")
    def update(self, request, pk=None):
        dto = LotUpdateDTO(**self._body(request))
        lot = estoque_command_bus.dispatch(UpdateLotCommand(id=str(pk), medico_id=_owner(request), payload=dto))
        return Response(LotSerializer(lot).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    @track_http("LotViewSet_destroy")
    def destroy(self, request, pk=None):
        estoque_command_bus.dispatch(DeleteLotCommand(id=str(pk), medico_id=_owner(request)))
        return Response(status=status.HTTP_204_NO_CONTENT)


# ───────────────────────────────────────────────────────────────────────────
class MovementViewSet(PaginationFilterMixin, viewsets.ViewSet):
    """Livro imutável: só listagem, consulta e lançamento (PUT/PATCH/DELETE → 405)."""
    permission_classes = [IsMedicoUser]
    filter_fields = ("produto_id", "tipo_movimentacao", "lote_id")

    @track_http("MovementViewSet_list")
    def list(self, request):
        page, limit = self._pagination(request)
        res = estoque_query_bus.dispatch(
            ListMovementsQuery(filtros=self._filters(request), page=page, page_size=limit)
        )
        return self._paged(res, MovementSerializer)

    @track_http("MovementViewSet_retrieve")
    def retrieve(self, request, pk=None):
        mov = estoque_query_bus.dispatch(GetMovementQuery(filtros={"id": str(pk), "medico_id": _owner(request)}))
        return Response(MovementSerializer(mov).data)

    @track_http("MovementViewSet_create")
    def create(self, request):
        dto = MovementDTO(**self._body(request))
        mov = estoque_command_bus.dispatch(RecordMovementCommand(medico_id=_owner(request), payload=dto))
        return Response(MovementSerializer(mov).data, status=status.HTTP_201_CREATED)
