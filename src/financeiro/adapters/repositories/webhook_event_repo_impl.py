from financeiro.core.domain.repositories.webhook_event_repository import WebhookEventRepository
from plugins.django_interface.models import ProviderWebhookEvent


class WebhookEventRepoImpl(WebhookEventRepository):
    def seen(self, event_id: str) -> bool:
        return ProviderWebhookEvent.objects.filter(event_id=event_id).exists()

    def record(self, *, event_id: str, event: str, charge_id: str | None, outcome: str) -> None:
        ProviderWebhookEvent.objects.create(
            event_id=event_id,
            event=event,
            charge_id=charge_id,
            outcome=outcome,
        )
