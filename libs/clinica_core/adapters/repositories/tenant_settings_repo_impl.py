from clinica_core.core.domain.entities.tenant_settings_entity import TenantSettingsEntity
from clinica_core.core.domain.repositories.provider_credential_repository import ProviderCredentialRepository
from clinica_core.core.domain.repositories.tenant_settings_repository import TenantSettingsRepository
from plugins.django_interface.models import TenantSettings as TenantSettingsModel


class TenantSettingsRepoImpl(TenantSettingsRepository):
    def __init__(self, credential_repo: ProviderCredentialRepository):
        self.credential_repo = credential_repo

    def _to_entity(self, medico_id: str, m: TenantSettingsModel | None) -> TenantSettingsEntity:
        return TenantSettingsEntity(
            medico_id=m.medico_id if m else medico_id,
            asaas_pix_key=m.asaas_pix_key if m else None,
            asaas_conectado=self.credential_repo.has_access_token(str(medico_id)),
            updated_at=m.updated_at if m else None,
        )

    def get(self, medico_id: str) -> TenantSettingsEntity:
        m = TenantSettingsModel.objects.filter(medico_id=medico_id).first()
        return self._to_entity(medico_id, m)

    def update_pix_key(self, medico_id: str, pix_key: str | None) -> TenantSettingsEntity:
        m, _ = TenantSettingsModel.objects.update_or_create(
            medico_id=medico_id,
            defaults={"asaas_pix_key": (pix_key or "").strip() or None},
        )
        return self._to_entity(medico_id, m)
