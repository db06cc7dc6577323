from rest_framework import serializers


class ProductSerializer(serializers.Serializer):
    id                     = serializers.UUIDField()
    medico_id              = serializers.UUIDField()
    tipo_produto           = serializers.CharField()
    nome_produto           = serializers.CharField()
    principio_ativo        = serializers.CharField(allow_null=True)
    codigo_barras          = serializers.CharField(allow_null=True)
    numero_registro_anvisa = serializers.CharField(allow_null=True)
    preco_venda            = serializers.DecimalField(max_digits=12, decimal_places=2)
    custo_aquisicao        = serializers.DecimalField(max_digits=12, decimal_places=2)
    estoque_atual          = serializers.IntegerField()
    estoque_minimo         = serializers.IntegerField()
    localizacao_estoque    = serializers.CharField(allow_null=True)
    abaixo_minimo          = serializers.SerializerMethodField()
    created_at             = serializers.DateTimeField(allow_null=True)
    updated_at             = serializers.DateTimeField(allow_null=True)

    def get_abaixo_minimo(self, obj) -> bool:
        return obj.abaixo_do_minimo()


class ProductBalanceSerializer(serializers.Serializer):
    produto_id     = serializers.UUIDField()
    estoque_atual  = serializers.IntegerField()
    saldo_livro    = serializers.IntegerField()
    consistente    = serializers.BooleanField()
    estoque_minimo = serializers.IntegerField()
    abaixo_minimo  = serializers.BooleanField()


class LotSerializer(serializers.Serializer):
    id              = serializers.UUIDField()
    medico_id       = serializers.UUIDField()
    produto_id      = serializers.UUIDField()
    numero_lote     = serializers.CharField(allow_null=True)
    data_validade   = serializers.DateField()
    quantidade_lote = serializers.IntegerField()
    data_entrada    = serializers.DateField()
    created_at      = serializers.DateTimeField(allow_null=True)
    updated_at      = serializers.DateTimeField(allow_null=True)


class MovementSerializer(serializers.Serializer):
    id                = serializers.UUIDField()
    medico_id         = serializers.UUIDField()
    produto_id        = serializers.UUIDField()
    lote_id           = serializers.UUIDField(allow_null=True)
    tipo_movimentacao = serializers.CharField()
    quantidade        = serializers.IntegerField()
    data_movimentacao = serializers.DateTimeField()
    origem_destino    = serializers.CharField(allow_null=True)
    observacoes       = serializers.CharField(allow_null=True)
    created_at        = serializers.DateTimeField(allow_null=True)
