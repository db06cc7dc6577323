from django.db import IntegrityError, transaction
from django.db.models import Q

from clinica_core.core.application.cqrs import PagedResult
from clinica_core.core.domain.entities.patient_entity import PatientEntity
from clinica_core.core.domain.exceptions import ConflictError
from clinica_core.core.domain.repositories.patient_repository import PatientRepository
from plugins.django_interface.models import Patient as PatientModel

_EDITABLE = (
    "nome_completo",
    "cpf",
    "email_paciente",
    "telefone_principal",
    "data_nascimento",
    "status_paciente",
)


class PatientRepoImpl(PatientRepository):
    def find_by_id(self, patient_id: str, medico_id: str) -> PatientEntity | None:
        m = PatientModel.objects.filter(id=patient_id, medico_id=medico_id).first()
        return PatientEntity.from_model(m) if m else None

    def lock_for_update(self, patient_id: str, medico_id: str) -> PatientEntity | None:
        m = (PatientModel.objects
             .select_for_update()
             .filter(id=patient_id, medico_id=medico_id)
             .first())
        return PatientEntity.from_model(m) if m else None

    def save(self, patient: PatientEntity) -> PatientEntity:
        defaults = {field: getattr(patient, field) for field in _EDITABLE}
        try:
            with transaction.atomic():
                m, _ = PatientModel.objects.update_or_create(
                    id=patient.id,
                    medico_id=patient.medico_id,
                    defaults=defaults,
                )
        except IntegrityError as exc:
            raise ConflictError("Paciente já cadastrado", "Já existe um paciente com este CPF") from exc
        return PatientEntity.from_model(m)

    def set_provider_customer_id(self, patient_id: str, customer_id: str) -> None:
        PatientModel.objects.filter(id=patient_id).update(asaas_customer_id=customer_id)

    def delete(self, patient_id: str, medico_id: str) -> bool:
        deleted, _ = PatientModel.objects.filter(id=patient_id, medico_id=medico_id).delete()
        return deleted > 0

    def list(self, filtros: dict, page: int, page_size: int) -> PagedResult[PatientEntity]:
        filtros = dict(filtros)
        qs = PatientModel.objects.filter(medico_id=filtros.pop("medico_id"))

        search = (filtros.pop("search", None) or "").strip()
        if search:
            qs = qs.filter(
                Q(nome_completo__icontains=search)
                | Q(cpf__icontains=search)
                | Q(telefone_principal__icontains=search)
                | Q(email_paciente__icontains=search)
            )
        status_paciente = filtros.pop("status_paciente", None)
        if status_paciente:
            qs = qs.filter(status_paciente=status_paciente)

        total = qs.count()
        offset = (page - 1) * page_size
        page_qs = qs.order_by("-created_at", "id")[offset : offset + page_size]

        items = [PatientEntity.from_model(m) for m in page_qs]
        return PagedResult(items=items, total=total, page=page, page_size=page_size)
