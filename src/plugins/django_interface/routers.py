from rest_framework.routers import DefaultRouter

from .views.core_views import PatientViewSet
from .views.estoque_views import LotViewSet, MovementViewSet, ProductViewSet
from .views.financeiro_views import ChargeViewSet, TransactionViewSet

# lista de (rota, ViewSet)
RESOURCES = [
    ("estoque-produtos-management/produtos",                ProductViewSet),
    ("estoque-movimentacoes-lotes-management/lotes",        LotViewSet),
    ("estoque-movimentacoes-lotes-management/movimentacoes", MovementViewSet),
    ("financeiro-management/cobrancas",                     ChargeViewSet),
    ("financeiro-management/transacoes",                    TransactionViewSet),
    ("crm-pacientes-management/pacientes",                  PatientViewSet),
]

def build_router() -> DefaultRouter:
    router = DefaultRouter(trailing_slash=False)
    # Registra todos os CRUDs
    for prefix, viewset in RESOURCES:
        basename = prefix.rsplit("/", 1)[-1].replace("-", "_")
        router.register(prefix, viewset, basename=basename)
    return router
