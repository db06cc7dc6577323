from django.core.management.base import BaseCommand, CommandError

from estoque.adapters.config.composition_root import container


class Command(BaseCommand):
    help = "Compara o saldo gravado de cada produto com a soma do livro de movimentações."

    def add_arguments(self, parser):
        parser.add_argument(
            "--medico-id",
            help="UUID do médico (opcional – confere todos se omitido).",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Sai com erro quando houver divergência (para uso em CI/cron).",
        )

    def handle(self, *args, **options):
        ledger = container.stock_ledger()
        divergences = ledger.divergences(medico_id=options.get("medico_id"))

        if not divergences:
            self.stdout.write(self.style.SUCCESS("Nenhuma divergência entre saldo e livro."))
            return

        for product, saldo_livro in divergences:
            self.stdout.write(
                self.style.WARNING(
                    f"{product.id} ({product.nome_produto}): estoque_atual={product.estoque_atual} "
                    f"livro={saldo_livro} medico={product.medico_id}"
                )
            )
        msg = f"{len(divergences)} produto(s) com saldo divergente do livro."
        if options["strict"]:
            raise CommandError(msg)
        self.stdout.write(self.style.NOTICE(msg))
