import structlog

from clinica_core.core.application.commands.tenant_settings_commands import UpdateTenantSettingsCommand
from clinica_core.core.application.cqrs import CommandHandler, QueryHandler
from clinica_core.core.application.queries.tenant_settings_queries import GetTenantSettingsQuery
from clinica_core.core.domain.entities.tenant_settings_entity import TenantSettingsEntity
from clinica_core.core.domain.repositories.provider_credential_repository import ProviderCredentialRepository
from clinica_core.core.domain.repositories.tenant_settings_repository import TenantSettingsRepository

logger = structlog.get_logger(__name__)


class GetTenantSettingsHandler(QueryHandler[GetTenantSettingsQuery, TenantSettingsEntity]):
    def __init__(self, repo: TenantSettingsRepository):
        self.repo = repo

    def handle(self, q: GetTenantSettingsQuery) -> TenantSettingsEntity:
        return self.repo.get(q.filtros["medico_id"])


class UpdateTenantSettingsHandler(CommandHandler[UpdateTenantSettingsCommand]):
    """
    Atualiza a chave PIX e/ou grava o token do Asaas (cifrado).
    Campos ausentes no payload ficam como estão.
    """
    def __init__(self, repo: TenantSettingsRepository, credential_repo: ProviderCredentialRepository):
        self.repo = repo
        self.credential_repo = credential_repo

    def handle(self, cmd: UpdateTenantSettingsCommand) -> TenantSettingsEntity:
        sent = cmd.payload.model_fields_set
        if "asaas_pix_key" in sent:
            self.repo.update_pix_key(cmd.medico_id, cmd.payload.asaas_pix_key)
        if "asaas_access_token" in sent and cmd.payload.asaas_access_token:
            self.credential_repo.save_access_token(cmd.medico_id, cmd.payload.asaas_access_token.strip())
        logger.info("configuracoes.atualizadas", medico_id=str(cmd.medico_id), campos=sorted(sent))
        return self.repo.get(cmd.medico_id)
