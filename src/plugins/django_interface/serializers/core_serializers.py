# =========================================================
# Serializers compatíveis com as *entities* (e não com os
# modelos Django): só leitura, o corpo de entrada é validado
# pelos DTOs pydantic.
# =========================================================
from rest_framework import serializers


# ───────────────────────────────────────────────
# Pacientes
# ───────────────────────────────────────────────
class PatientSerializer(serializers.Serializer):
    id                 = serializers.UUIDField()
    medico_id          = serializers.UUIDField()
    nome_completo      = serializers.CharField()
    cpf                = serializers.CharField(allow_null=True)
    email_paciente     = serializers.EmailField(allow_null=True)
    telefone_principal = serializers.CharField(allow_null=True)
    data_nascimento    = serializers.DateField(allow_null=True)
    status_paciente    = serializers.CharField()
    asaas_customer_id  = serializers.CharField(allow_null=True)
    created_at         = serializers.DateTimeField(allow_null=True)
    updated_at         = serializers.DateTimeField(allow_null=True)


# ───────────────────────────────────────────────
# Configurações do médico (o token nunca sai)
# ───────────────────────────────────────────────
class TenantSettingsSerializer(serializers.Serializer):
    asaas_pix_key   = serializers.CharField(allow_null=True)
    asaas_conectado = serializers.BooleanField()
    updated_at      = serializers.DateTimeField(allow_null=True)
