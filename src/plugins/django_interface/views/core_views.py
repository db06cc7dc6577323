# ╭────────────────────────────────────────────────────────────────────────────╮
# │  ViewSets REST – Core (pacientes e configurações do médico)                │
# │                                                                            │
# │  • Tenant          → medico_id sempre do token, nunca do corpo             │
# │  • Paginação DRY   → mix-in centralizado (page / limit)                    │
# │  • Métrica trace   → decorator `track_http`                                │
# ╰────────────────────────────────────────────────────────────────────────────╯
from __future__ import annotations

from typing import Any

from rest_framework import status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from clinica_core.adapters.config.composition_root import container as core_container
from clinica_core.adapters.observability.decorators import track_http
from clinica_core.core.application.commands.patient_commands import (
    CreatePatientCommand,
    DeletePatientCommand,
    UpdatePatientCommand,
)
from clinica_core.core.application.commands.tenant_settings_commands import UpdateTenantSettingsCommand
from clinica_core.core.application.cqrs import CommandBusImpl, PagedResult, QueryBusImpl
from clinica_core.core.application.dtos.patient_dto import PatientDTO, PatientUpdateDTO
from clinica_core.core.application.dtos.tenant_settings_dto import TenantSettingsDTO
from clinica_core.core.application.queries.patient_queries import GetPatientQuery, ListPatientsQuery
from clinica_core.core.application.queries.tenant_settings_queries import GetTenantSettingsQuery
from clinica_core.core.domain.exceptions import InvalidRequestError
from config import settings
from plugins.django_interface.permissions import IsMedicoUser
from plugins.django_interface.serializers.core_serializers import PatientSerializer, TenantSettingsSerializer

core_command_bus: CommandBusImpl = core_container.command_bus()
core_query_bus: QueryBusImpl = core_container.query_bus()

_TRUE = {"1", "true", "sim", "yes"}


# ╭──────────────────────────────────────────────────────────────────────────╮
# │ Helper mix-in – paginação + filtros + corpo                              │
# ╰──────────────────────────────────────────────────────────────────────────╯
class PaginationFilterMixin:
    """
    Lê `page`/`limit` (1-based, limite máximo em settings) e os filtros
    permitidos pela view. O `medico_id` entra sempre a partir do token.
    """
    filter_fields: tuple[str, ...] = ()
    bool_filters: tuple[str, ...] = ()

    @staticmethod
    def _pagination(request) -> tuple[int, int]:
        try:
            page = int(request.query_params.get("page", 1))
            limit = int(request.query_params.get("limit", settings.DEFAULT_PAGE_LIMIT))
        except (TypeError, ValueError):
            raise InvalidRequestError("Paginação inválida", "page e limit devem ser inteiros") from None
        if page < 1:
            raise InvalidRequestError("Paginação inválida", "page deve ser >= 1")
        if not 1 <= limit <= settings.MAX_PAGE_LIMIT:
            raise InvalidRequestError("Paginação inválida", f"limit deve estar entre 1 e {settings.MAX_PAGE_LIMIT}")
        return page, limit

    def _filters(self, request) -> dict[str, Any]:
        clean: dict[str, Any] = {"medico_id": str(request.user.medico_id)}
        for key in self.filter_fields:
            value = request.query_params.get(key)
            if value in (None, ""):
                continue
            clean[key] = value.strip().lower() in _TRUE if key in self.bool_filters else value
        return clean

    @staticmethod
    def _body(request) -> dict[str, Any]:
        data = request.data
        if not isinstance(data, dict):
            raise InvalidRequestError("JSON inválido", "O corpo deve ser um objeto")
        return dict(data.items())

    @staticmethod
    def _paged(res: PagedResult, serializer_cls) -> Response:
        return Response(
            {
                "data": serializer_cls(res.items, many=True).data,
                "page": res.page,
                "limit": res.page_size,
                "total": res.total,
                "hasMore": res.has_more,
            }
        )


# ╭──────────────────────────────────────────────╮
# │  Pacientes                                   │
# ╰──────────────────────────────────────────────╯
class PatientViewSet(PaginationFilterMixin, viewsets.ViewSet):
    permission_classes = [IsMedicoUser]
    filter_fields = ("search", "status_paciente")

    @track_http("PatientViewSet_list")
    def list(self, request):
        page, limit = self._pagination(request)
        res = core_query_bus.dispatch(
            ListPatientsQuery(filtros=self._filters(request), page=page, page_size=limit)
        )
        return self._paged(res, PatientSerializer)

    @track_http("PatientViewSet_retrieve")
    def retrieve(self, request, pk=None):
        pat = core_query_bus.dispatch(
            GetPatientQuery(filtros={"id": str(pk), "medico_id": str(request.user.medico_id)})
        )
        return Response(PatientSerializer(pat).data)

    @track_http("PatientViewSet_create")
    def create(self, request):
        dto = PatientDTO(**self._body(request))
        pat = core_command_bus.dispatch(CreatePatientCommand(medico_id=str(request.user.medico_id), payload=dto))
        return Response(PatientSerializer(pat).data, status=status.HTTP_201_CREATED)

    @track_http("PatientViewSet_update")
    def update(self, request, pk=None):
        dto = PatientUpdateDTO(**self._body(request))
        pat = core_command_bus.dispatch(
            UpdatePatientCommand(id=str(pk), medico_id=str(request.user.medico_id), payload=dto)
        )
        return Response(PatientSerializer(pat).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk)

    @track_http("PatientViewSet_destroy")
    def destroy(self, request, pk=None):
        core_command_bus.dispatch(DeletePatientCommand(id=str(pk), medico_id=str(request.user.medico_id)))
        return Response(status=status.HTTP_204_NO_CONTENT)


# ╭──────────────────────────────────────────────╮
# │  Configurações do Asaas                      │
# ╰──────────────────────────────────────────────╯
class TenantSettingsView(PaginationFilterMixin, APIView):
    """GET/PUT /api/configuracoes/asaas: chave PIX e token (gravado cifrado)."""
    permission_classes = [IsMedicoUser]

    @track_http("TenantSettingsView_get")
    def get(self, request):
        res = core_query_bus.dispatch(GetTenantSettingsQuery(filtros={"medico_id": str(request.user.medico_id)}))
        return Response(TenantSettingsSerializer(res).data)

    @track_http("TenantSettingsView_put")
    def put(self, request):
        dto = TenantSettingsDTO(**self._body(request))
        res = core_command_bus.dispatch(
            UpdateTenantSettingsCommand(medico_id=str(request.user.medico_id), payload=dto)
        )
        return Response(TenantSettingsSerializer(res).data)
