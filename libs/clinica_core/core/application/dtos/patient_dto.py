import re
from datetime import date

from pydantic import BaseModel, EmailStr, Field, field_validator

_DIGITS = re.compile(r"\D")


def clean_cpf(value: str | None) -> str | None:
    """Mantém só os dígitos; vazio vira None; qualquer coisa além de 11 dígitos é inválida."""
    if value is None:
        return None
    digits = _DIGITS.sub("", str(value))
    if not digits:
        return None
    if len(digits) != 11:  # noqa: PLR2004
        raise ValueError("CPF deve conter 11 dígitos")
    return digits


class PatientDTO(BaseModel):
    nome_completo: str = Field(min_length=1, max_length=200)
    cpf: str | None = None
    email_paciente: EmailStr | None = None
    telefone_principal: str | None = Field(default=None, max_length=30)
    data_nascimento: date | None = None
    status_paciente: str = "Paciente Ativo"

    @field_validator("cpf", mode="before")
    @classmethod
    def _validate_cpf(cls, v):
        return clean_cpf(v)


class PatientUpdateDTO(BaseModel):
    """Atualização parcial: só os campos enviados são aplicados."""
    nome_completo: str | None = Field(default=None, min_length=1, max_length=200)
    cpf: str | None = None
    email_paciente: EmailStr | None = None
    telefone_principal: str | None = Field(default=None, max_length=30)
    data_nascimento: date | None = None
    status_paciente: str | None = None

    @field_validator("cpf", mode="before")
    @classmethod
    def _validate_cpf(cls, v):
        return clean_cpf(v)
