from clinica_core.core.application.cqrs import CommandHandler
from financeiro.core.application.commands.webhook_commands import (
    ProcessProviderWebhookCommand,
    RetryReconciliationsCommand,
)
from financeiro.core.application.services.reconciliation_service import ReconciliationService
from financeiro.core.application.services.webhook_reconciler import WebhookReconciler


class ProcessProviderWebhookHandler(CommandHandler[ProcessProviderWebhookCommand]):
    def __init__(self, reconciler: WebhookReconciler):
        self.reconciler = reconciler

    def handle(self, cmd: ProcessProviderWebhookCommand) -> dict:
        return self.reconciler.process(cmd.raw_body, cmd.headers)


class RetryReconciliationsHandler(CommandHandler[RetryReconciliationsCommand]):
    def __init__(self, service: ReconciliationService):
        self.service = service

    def handle(self, cmd: RetryReconciliationsCommand) -> dict[str, int]:
        return self.service.retry_pending(cmd.limit)
