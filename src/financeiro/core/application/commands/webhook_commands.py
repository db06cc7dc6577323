from collections.abc import Mapping
from dataclasses import dataclass

from clinica_core.core.application.cqrs import CommandDTO


@dataclass(frozen=True)
class ProcessProviderWebhookCommand(CommandDTO):
    """Corpo bruto + headers: a assinatura é conferida sobre os bytes recebidos."""
    raw_body: bytes
    headers: Mapping[str, str]

@dataclass(frozen=True, slots=True)
class RetryReconciliationsCommand(CommandDTO):
    limit: int = 100
