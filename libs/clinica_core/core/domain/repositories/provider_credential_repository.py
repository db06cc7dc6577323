from abc import ABC, abstractmethod


class ProviderCredentialRepository(ABC):
    """Tokens de acesso a provedores externos, guardados cifrados por médico."""

    @abstractmethod
    def get_access_token(self, medico_id: str, provider: str = "asaas") -> str | None:
        """Token em texto claro ou None se ausente/ilegível."""
        ...

    @abstractmethod
    def save_access_token(self, medico_id: str, token: str, provider: str = "asaas") -> None:
        """Upsert em (medico_id, provider)."""
        ...

    @abstractmethod
    def has_access_token(self, medico_id: str, provider: str = "asaas") -> bool:
        ...
