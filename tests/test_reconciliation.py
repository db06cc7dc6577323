import uuid
from io import StringIO

from django.core.management import call_command
from django.test import TestCase

from clinica_core.adapters.config import composition_root as core_root
from clinica_core.core.domain.exceptions import ProviderError
from plugins.django_interface.models import PendingReconciliation
from tests.helpers.fake_gateway import install_fake_gateway


class RetryReconciliationsCommandTests(TestCase):
    def setUp(self) -> None:
        self.fake = install_fake_gateway(self)
        self.medico_id = uuid.uuid4()
        core_root.container.credential_repo().save_access_token(str(self.medico_id), "tok")

    def _open(self, external_id: str, medico_id=None) -> PendingReconciliation:
        return PendingReconciliation.objects.create(
            kind=PendingReconciliation.Kind.ORPHAN_PROVIDER_CHARGE,
            medico_id=medico_id or self.medico_id,
            local_reference=str(uuid.uuid4()),
            external_id=external_id,
            error="compensação falhou",
        )

    def _run(self, *args) -> str:
        out = StringIO()
        call_command("retry_reconciliations", *args, stdout=out)
        return out.getvalue()

    def test_resolves_pending_records(self) -> None:
        rec = self._open("pay_orfao")
        self.assertIn("Resolvidas: 1 | Falharam: 0", self._run())
        rec.refresh_from_db()
        self.assertEqual((rec.status, rec.attempts, rec.error), ("RESOLVED", 1, ""))
        self.assertEqual(self.fake.deleted, ["pay_orfao"])
        self.assertEqual(self.fake.tokens, ["tok"])

    def test_payment_already_gone_counts_as_resolved(self) -> None:
        rec = self._open("pay_sumiu")
        self.fake.fail_delete = ProviderError("Erro no Asaas (delete_payment)", "not found", status=404)
        self._run()
        rec.refresh_from_db()
        self.assertEqual(rec.status, "RESOLVED")

    def test_failure_is_counted_and_kept_pending(self) -> None:
        rec = self._open("pay_teimoso")
        self.fake.fail_delete = ProviderError("Erro no Asaas (delete_payment)", "indisponível", status=503)
        self.assertIn("Falharam: 1", self._run())
        self._run()
        rec.refresh_from_db()
        self.assertEqual((rec.status, rec.attempts, rec.error), ("PENDING", 2, "indisponível"))

    def test_missing_token_fails_without_calling_provider(self) -> None:
        rec = self._open("pay_x", medico_id=uuid.uuid4())
        self._run()
        rec.refresh_from_db()
        self.assertEqual((rec.status, rec.attempts), ("PENDING", 1))
        self.assertEqual(self.fake.tokens, [])

    def test_limit(self) -> None:
        for i in range(3):
            self._open(f"pay_{i}")
        self.assertIn("Resolvidas: 2", self._run("--limit", "2"))
        self.assertEqual(PendingReconciliation.objects.filter(status="PENDING").count(), 1)
