from django.core.management.base import BaseCommand

from financeiro.adapters.config.composition_root import container
from financeiro.core.application.commands.webhook_commands import RetryReconciliationsCommand


class Command(BaseCommand):
    help = "Reexecuta no Asaas o cancelamento das cobranças órfãs/substituídas pendentes de reconciliação."

    def add_arguments(self, parser):
        parser.add_argument(
            "--limit",
            type=int,
            default=100,
            help="Máximo de registros processados nesta execução (default: 100).",
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.NOTICE("Processando reconciliações pendentes..."))
        result = container.command_bus().dispatch(RetryReconciliationsCommand(limit=options["limit"]))
        style = self.style.SUCCESS if not result["failed"] else self.style.WARNING
        self.stdout.write(style(f"Resolvidas: {result['resolved']} | Falharam: {result['failed']}"))
