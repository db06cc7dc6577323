import structlog

from clinica_core.core.domain.exceptions import ProviderError
from clinica_core.core.domain.repositories.provider_credential_repository import ProviderCredentialRepository
from financeiro.core.domain.repositories.payment_gateway import GatewayFactory
from financeiro.core.domain.repositories.reconciliation_repository import ReconciliationRepository

logger = structlog.get_logger(__name__)

_HTTP_NOT_FOUND = 404


class ReconciliationService:
    """Reexecuta no provedor o cancelamento das cobranças que ficaram órfãs ou substituídas."""

    def __init__(
        self,
        repo: ReconciliationRepository,
        credential_repo: ProviderCredentialRepository,
        gateway_factory: GatewayFactory,
    ):
        self.repo = repo
        self.credential_repo = credential_repo
        self.gateway_factory = gateway_factory

    def retry_pending(self, limit: int = 100) -> dict[str, int]:
        resolved = failed = 0
        for rec in self.repo.list_pending(limit):
            log = logger.bind(reconciliation_id=str(rec.id), kind=rec.kind, external_id=rec.external_id)

            token = self.credential_repo.get_access_token(str(rec.medico_id))
            if not token:
                self.repo.register_failure(str(rec.id), "Token Asaas não configurado para este médico")
                log.warning("reconciliacao.sem_token")
                failed += 1
                continue

            try:
                self.gateway_factory(access_token=token).delete_payment(rec.external_id)
            except ProviderError as exc:
                if exc.status != _HTTP_NOT_FOUND:
                    self.repo.register_failure(str(rec.id), exc.details or exc.message)
                    log.warning("reconciliacao.falhou", error=exc.details)
                    failed += 1
                    continue
                log.info("reconciliacao.ja_removida")

            self.repo.mark_resolved(str(rec.id))
            log.info("reconciliacao.resolvida")
            resolved += 1
        return {"resolved": resolved, "failed": failed}
