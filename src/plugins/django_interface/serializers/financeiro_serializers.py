from rest_framework import serializers


class ChargeSerializer(serializers.Serializer):
    id                 = serializers.UUIDField()
    medico_id          = serializers.UUIDField()
    paciente_id        = serializers.UUIDField()
    paciente_nome      = serializers.CharField(allow_null=True)
    descricao          = serializers.CharField()
    valor              = serializers.DecimalField(max_digits=12, decimal_places=2)
    data_vencimento    = serializers.DateField()
    metodo_pagamento   = serializers.CharField()
    status_cobranca    = serializers.CharField()
    asaas_charge_id    = serializers.CharField(allow_null=True)
    link_pagamento     = serializers.CharField(allow_null=True)
    pix_copia_cola     = serializers.CharField(allow_null=True)
    qr_code_pix_base64 = serializers.CharField(allow_null=True)
    data_pagamento     = serializers.DateTimeField(allow_null=True)
    created_at         = serializers.DateTimeField(allow_null=True)
    updated_at         = serializers.DateTimeField(allow_null=True)


class TransactionSerializer(serializers.Serializer):
    id             = serializers.UUIDField()
    medico_id      = serializers.UUIDField()
    tipo_transacao = serializers.CharField()
    descricao      = serializers.CharField()
    valor          = serializers.DecimalField(max_digits=12, decimal_places=2)
    data_transacao = serializers.DateField()
    categoria      = serializers.CharField(allow_null=True)
    meio_pagamento = serializers.CharField(allow_null=True)
    cobranca_id    = serializers.UUIDField(allow_null=True)
    created_at     = serializers.DateTimeField(allow_null=True)
    updated_at     = serializers.DateTimeField(allow_null=True)


class PaginatedResponseSerializer(serializers.Serializer):
    """Envelope das listagens (documentação do Swagger)."""
    data    = serializers.ListField(child=serializers.DictField())
    page    = serializers.IntegerField()
    limit   = serializers.IntegerField()
    total   = serializers.IntegerField()
    hasMore = serializers.BooleanField()  # noqa: N815
