import structlog
from django.db import transaction

from clinica_core.core.domain.exceptions import ResourceNotFoundError
from clinica_core.core.domain.repositories.patient_repository import PatientRepository
from financeiro.core.domain.repositories.payment_gateway import PaymentGateway

logger = structlog.get_logger(__name__)


class CustomerService:
    """
    Garante um cliente no Asaas por paciente.

    A linha do paciente fica travada durante a busca/criação, então duas
    cobranças simultâneas para o mesmo paciente não criam dois clientes.
    Antes de criar, procura um cliente com externalReference = id do
    paciente (sobra de uma tentativa anterior que não chegou a gravar o id).
    """

    def __init__(self, patient_repo: PatientRepository):
        self.patient_repo = patient_repo

    def ensure_customer(self, gateway: PaymentGateway, medico_id: str, patient_id: str) -> str:
        with transaction.atomic():
            patient = self.patient_repo.lock_for_update(str(patient_id), str(medico_id))
            if patient is None:
                raise ResourceNotFoundError("Paciente não encontrado")
            if patient.asaas_customer_id:
                return patient.asaas_customer_id

            reference = str(patient.id)
            customer = gateway.find_customer_by_reference(reference)
            if customer is not None:
                logger.info("asaas.cliente_reaproveitado", paciente_id=reference, customer_id=customer.id)
            else:
                customer = gateway.create_customer(
                    name=patient.nome_completo,
                    external_reference=reference,
                    email=patient.email_paciente,
                    mobile_phone=patient.telefone_principal,
                    cpf_cnpj=patient.cpf,
                )
            self.patient_repo.set_provider_customer_id(reference, customer.id)
            return customer.id
