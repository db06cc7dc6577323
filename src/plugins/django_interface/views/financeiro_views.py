# ╭────────────────────────────────────────────────────────────────────────────╮
# │  ViewSets REST – Financeiro (cobranças Asaas, transações e webhook)        │
# ╰────────────────────────────────────────────────────────────────────────────╯
from __future__ import annotations

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.views import APIView

from clinica_core.adapters.observability.decorators import track_http
from clinica_core.core.application.cqrs import CommandBusImpl, QueryBusImpl
from financeiro.adapters.config.composition_root import container as financeiro_container
from financeiro.core.application.commands.charge_commands import (
    CreateChargeCommand,
    DeleteChargeCommand,
    RegenerateChargeLinkCommand,
    UpdateChargeCommand,
)
from financeiro.core.application.commands.transaction_commands import (
    CreateTransactionCommand,
    DeleteTransactionCommand,
    UpdateTransactionCommand,
)
from financeiro.core.application.commands.webhook_commands import ProcessProviderWebhookCommand
from financeiro.core.application.dtos.charge_dto import ChargeDTO, ChargeUpdateDTO, RegenerateLinkDTO
from financeiro.core.application.dtos.transaction_dto import TransactionDTO, TransactionUpdateDTO
from financeiro.core.application.queries.financeiro_queries import (
    GetChargeQuery,
    GetTransactionQuery,
    ListChargesQuery,
    ListTransactionsQuery,
)
from plugins.django_interface.permissions import IsMedicoUser
from plugins.django_interface.serializers.financeiro_serializers import ChargeSerializer, TransactionSerializer
from plugins.django_interface.views.core_views import PaginationFilterMixin

financeiro_command_bus: CommandBusImpl = financeiro_container.command_bus()
financeiro_query_bus: QueryBusImpl = financeiro_container.query_bus()


def _owner(request) -> str:
    return str(request.user.medico_id)


# ╭──────────────────────────────────────────────╮
# │  Cobranças                                   │
# ╰──────────────────────────────────────────────╯
class ChargeViewSet(PaginationFilterMixin, viewsets.ViewSet):
    permission_classes = [IsMedicoUser]
    filter_fields = ("search", "status_cobranca", "paciente_id")

    @track_http("ChargeViewSet_list")
    def list(self, request):
        page, limit = self._pagination(request)
        res = financeiro_query_bus.dispatch(
            ListChargesQuery(filtros=self._filters(request), page=page, page_size=limit)
        )
        return self._paged(res, ChargeSerializer)

    @track_http("ChargeViewSet_retrieve")
    def retrieve(self, request, pk=None):
        charge = financeiro_query_bus.dispatch(GetChargeQuery(filtros={"id": str(pk), "medico_id": _owner(request)}))
        return Response(ChargeSerializer(charge).data)

    @track_http("ChargeViewSet_create")
    def create(self, request):
        dto = ChargeDTO(**self._body(request))
        charge = financeiro_command_bus.dispatch(CreateChargeCommand(medico_id=_owner(request), payload=dto))
        return Response(ChargeSerializer(charge).data, status=status.HTTP_201_CREATED)

    @track_http("ChargeViewSet_update")
    def update(self, request, pk=None):
        dto = ChargeUpdateDTO(**self._body(request))
        charge = financeiro_command_bus.dispatch(
            UpdateChargeCommand(id=str(pk), medico_id=_owner(request), payload=dto)
        )
        return Response(ChargeSerializer(charge).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    @track_http("ChargeViewSet_destroy")
    def destroy(self, request, pk=None):
        financeiro_command_bus.dispatch(DeleteChargeCommand(id=str(pk), medico_id=_owner(request)))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @track_http("ChargeViewSet_gerar_link")
    @action(detail=True, methods=["post"], url_path="gerar-link")
    def gerar_link(self, request, pk=None):
        dto = RegenerateLinkDTO(**self._body(request))
        charge = financeiro_command_bus.dispatch(
            RegenerateChargeLinkCommand(id=str(pk), medico_id=_owner(request), payload=dto)
        )
        return Response(ChargeSerializer(charge).data)


# ╭──────────────────────────────────────────────╮
# │  Transações financeiras                      │
# ╰──────────────────────────────────────────────╯
class TransactionViewSet(PaginationFilterMixin, viewsets.ViewSet):
    permission_classes = [IsMedicoUser]
    filter_fields = ("tipo_transacao", "search", "data_inicio", "data_fim")

    @track_http("TransactionViewSet_list")
    def list(self, request):
        page, limit = self._pagination(request)
        res = financeiro_query_bus.dispatch(
            ListTransactionsQuery(filtros=self._filters(request), page=page, page_size=limit)
        )
        return self._paged(res, TransactionSerializer)

    @track_http("TransactionViewSet_retrieve")
    def retrieve(self, request, pk=None):
        tx = financeiro_query_bus.dispatch(GetTransactionQuery(filtros={"id": str(pk), "medico_id": _owner(request)}))
        return Response(TransactionSerializer(tx).data)

    @track_http("TransactionViewSet_create")
    def create(self, request):
        dto = TransactionDTO(**self._body(request))
        tx = financeiro_command_bus.dispatch(CreateTransactionCommand(medico_id=_owner(request), payload=dto))
        return Response(TransactionSerializer(tx).data, status=status.HTTP_201_CREATED)

    @track_http("TransactionViewSet_update")
    def update(self, request, pk=None):
        dto = TransactionUpdateDTO(**self._body(request))
        tx = financeiro_command_bus.dispatch(
            UpdateTransactionCommand(id=str(pk), medico_id=_owner(request), payload=dto)
        )
        return Response(TransactionSerializer(tx).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    @track_http("TransactionViewSet_destroy")
    def destroy(self, request, pk=None):
        financeiro_command_bus.dispatch(DeleteTransactionCommand(id=str(pk), medico_id=_owner(request)))
        return Response(status=status.HTTP_204_NO_CONTENT)


# ╭──────────────────────────────────────────────╮
# │  Webhook do Asaas (sem bearer; assinatura)   │
# ╰──────────────────────────────────────────────╯
class ProviderWebhookView(APIView):
    """
    Rota POST /api/financeiro-webhook-handler.
    A autenticidade é conferida sobre o corpo bruto, antes de qualquer parse.
    """
    permission_classes = [permissions.AllowAny]
    authentication_classes = []

    @track_http("ProviderWebhookView_post")
    def post(self, request):
        result = financeiro_command_bus.dispatch(
            ProcessProviderWebhookCommand(raw_body=request.body, headers=request.headers)
        )
        return Response(result, status=status.HTTP_200_OK)
