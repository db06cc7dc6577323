import structlog

from clinica_core.adapters.security.token_cipher import TokenCipher
from clinica_core.core.domain.repositories.provider_credential_repository import ProviderCredentialRepository
from plugins.django_interface.models import ProviderCredential as ProviderCredentialModel

logger = structlog.get_logger(__name__)


class ProviderCredentialRepoImpl(ProviderCredentialRepository):
    def __init__(self, cipher: TokenCipher):
        self.cipher = cipher

    def get_access_token(self, medico_id: str, provider: str = "asaas") -> str | None:
        m = ProviderCredentialModel.objects.filter(medico_id=medico_id, provider=provider).first()
        if not m:
            logger.info("credential.ausente", medico_id=str(medico_id), provider=provider)
            return None
        token = self.cipher.decrypt(m.access_token)
        if token is None:
            logger.error("credential.ilegivel", medico_id=str(medico_id), provider=provider)
        return token

    def save_access_token(self, medico_id: str, token: str, provider: str = "asaas") -> None:
        ProviderCredentialModel.objects.update_or_create(
            medico_id=medico_id,
            provider=provider,
            defaults={"access_token": self.cipher.encrypt(token)},
        )
        logger.info("credential.salva", medico_id=str(medico_id), provider=provider)

    def has_access_token(self, medico_id: str, provider: str = "asaas") -> bool:
        return ProviderCredentialModel.objects.filter(medico_id=medico_id, provider=provider).exists()
