from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

from config import settings

from .routers import build_router
from .views.auth_views import HealthCheckView
from .views.core_views import TenantSettingsView
from .views.financeiro_views import ProviderWebhookView

swagger_permissions = [permissions.IsAdminUser] if not settings.DEBUG else [permissions.AllowAny]

schema_view = get_schema_view(
    openapi.Info(
        title="Gestão Clínica API",
        default_version="v1",
        description="Estoque, cobranças Asaas e conciliação por webhook (CQRS + Bus)",
        license=openapi.License(name="BSD License"),
    ),
    public=settings.DEBUG,
    permission_classes=swagger_permissions,
)

router = build_router()

urlpatterns = [
    path("healthz/", HealthCheckView.as_view(), name="healthz"),
    path("configuracoes/asaas", TenantSettingsView.as_view(), name="configuracoes-asaas"),
    path("financeiro-webhook-handler", ProviderWebhookView.as_view(), name="financeiro-webhook"),

    path("swagger/",     schema_view.with_ui("swagger", cache_timeout=0), name="swagger-ui"),
    path("swagger.json", schema_view.without_ui(cache_timeout=0),         name="swagger-json"),
    path("redoc/",       schema_view.with_ui("redoc",   cache_timeout=0), name="redoc-ui"),

    # todas as rotas CRUD
    path("", include(router.urls)),
]
