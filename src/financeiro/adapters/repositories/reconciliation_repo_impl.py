import structlog
from django.db.models import F

from clinica_core.adapters.observability.metrics import RECONCILIATIONS_OPENED
from financeiro.core.domain.entities.reconciliation_entity import ReconciliationEntity
from financeiro.core.domain.repositories.reconciliation_repository import ReconciliationRepository
from plugins.django_interface.models import PendingReconciliation as ReconciliationModel

logger = structlog.get_logger(__name__)


class ReconciliationRepoImpl(ReconciliationRepository):
    def open(self, *, kind: str, medico_id: str, local_reference: str, external_id: str, error: str) -> ReconciliationEntity:
        m = ReconciliationModel.objects.create(
            kind=kind,
            medico_id=medico_id,
            local_reference=str(local_reference),
            external_id=external_id,
            error=error[:2000],
        )
        RECONCILIATIONS_OPENED.labels(kind).inc()
        logger.error(
            "reconciliacao.aberta",
            reconciliation_id=str(m.id),
            kind=kind,
            medico_id=str(medico_id),
            external_id=external_id,
        )
        return ReconciliationEntity.from_model(m)

    def list_pending(self, limit: int = 100) -> list[ReconciliationEntity]:
        qs = ReconciliationModel.objects.filter(status=ReconciliationModel.Status.PENDING).order_by("created_at")
        return [ReconciliationEntity.from_model(m) for m in qs[:limit]]

    def mark_resolved(self, reconciliation_id: str) -> None:
        ReconciliationModel.objects.filter(id=reconciliation_id).update(
            status=ReconciliationModel.Status.RESOLVED,
            attempts=F("attempts") + 1,
            error="",
        )

    def register_failure(self, reconciliation_id: str, error: str) -> None:
        ReconciliationModel.objects.filter(id=reconciliation_id).update(
            attempts=F("attempts") + 1,
            error=error[:2000],
        )
