from abc import ABC, abstractmethod


class WebhookEventRepository(ABC):
    """Ids de eventos do provedor já aplicados."""

    @abstractmethod
    def seen(self, event_id: str) -> bool:
        ...

    @abstractmethod
    def record(self, *, event_id: str, event: str, charge_id: str | None, outcome: str) -> None:
        ...
