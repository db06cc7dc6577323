"""
Domínio → ORM

⚑ Todas as tabelas carregam `medico_id` (chave do tenant) indexado
⚑ Saldo de estoque e quantidade de lote com CHECK >= 0
⚑ Movimentações são append-only: não há caminho de update/delete
⚑ Unicidade onde a concorrência pode duplicar (cliente Asaas, CPF, evento de webhook)
"""

from __future__ import annotations

import uuid

from django.db import models
from django.db.models import CheckConstraint, Index, Q, UniqueConstraint


# ╭──────────────────────────────────────────────╮
# │ 1. Pacientes / Configurações do Médico      │
# ╰──────────────────────────────────────────────╯
class Patient(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    medico_id = models.UUIDField(db_index=True)
    nome_completo = models.CharField(max_length=200)
    cpf = models.CharField(max_length=11, blank=True, null=True)
    email_paciente = models.EmailField(blank=True, null=True)
    telefone_principal = models.CharField(max_length=30, blank=True, null=True)
    data_nascimento = models.DateField(blank=True, null=True)
    status_paciente = models.CharField(max_length=50, default="Paciente Ativo")
    asaas_customer_id = models.CharField(
        max_length=64, blank=True, null=True, unique=True,
        help_text="Id do cliente no Asaas, criado na primeira cobrança",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "pacientes"
        indexes = [
            Index(fields=["medico_id", "created_at"]),
        ]
        constraints = [
            UniqueConstraint(
                fields=["medico_id", "cpf"],
                condition=Q(cpf__isnull=False),
                name="uq_paciente_cpf_por_medico",
            )
        ]

    def __str__(self) -> str:
        return self.nome_completo


class TenantSettings(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    medico_id = models.UUIDField(unique=True)
    asaas_pix_key = models.CharField(max_length=140, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "medico_configuracoes"


class ProviderCredential(models.Model):
    """Token de acesso do médico a um provedor externo, cifrado com Fernet."""
    class Provider(models.TextChoices):
        ASAAS = "asaas", "Asaas"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    medico_id = models.UUIDField(db_index=True)
    provider = models.CharField(max_length=30, choices=Provider.choices, default=Provider.ASAAS)
    access_token = models.TextField(help_text="Token cifrado; nunca em texto claro")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "medico_oauth_tokens"
        constraints = [
            UniqueConstraint(fields=["medico_id", "provider"], name="uq_token_por_medico_provider")
        ]


# ╭──────────────────────────────────────────────╮
# │ 2. Estoque                                   │
# ╰──────────────────────────────────────────────╯
class Product(models.Model):
    class Tipo(models.TextChoices):
        MEDICAMENTO = "Medicamento", "Medicamento"
        INSUMO      = "Insumo", "Insumo"
        OUTRO       = "Outro", "Outro"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    medico_id = models.UUIDField(db_index=True)
    tipo_produto = models.CharField(max_length=20, choices=Tipo.choices, default=Tipo.OUTRO)
    nome_produto = models.CharField(max_length=200)
    principio_ativo = models.CharField(max_length=200, blank=True, null=True)
    codigo_barras = models.CharField(max_length=64, blank=True, null=True)
    numero_registro_anvisa = models.CharField(max_length=64, blank=True, null=True)
    preco_venda = models.DecimalField(max_digits=12, decimal_places=2)
    custo_aquisicao = models.DecimalField(max_digits=12, decimal_places=2)
    estoque_atual = models.IntegerField(default=0, help_text="Saldo; só muda via movimentação")
    estoque_minimo = models.IntegerField(default=0)
    localizacao_estoque = models.CharField(max_length=120, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "produtos"
        ordering = ["nome_produto"]
        indexes = [
            Index(fields=["medico_id", "nome_produto"]),
            Index(fields=["medico_id", "codigo_barras"]),
        ]
        constraints = [
            CheckConstraint(condition=Q(estoque_atual__gte=0), name="ck_produto_estoque_nao_negativo"),
            CheckConstraint(condition=Q(estoque_minimo__gte=0), name="ck_produto_minimo_nao_negativo"),
        ]

    def __str__(self) -> str:
        return self.nome_produto


class Lot(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    medico_id = models.UUIDField(db_index=True)
    produto = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="lotes")
    numero_lote = models.CharField(max_length=64, blank=True, null=True)
    data_validade = models.DateField()
    quantidade_lote = models.IntegerField()
    data_entrada = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "lotes_produtos"
        indexes = [
            Index(fields=["medico_id", "data_validade"]),
            Index(fields=["produto", "data_validade"]),
        ]
        constraints = [
            CheckConstraint(condition=Q(quantidade_lote__gte=0), name="ck_lote_quantidade_nao_negativa"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.numero_lote or self.id} (val. {self.data_validade})"


class StockMovement(models.Model):
    """Livro-razão do estoque. Estornos são feitos com nova movimentação."""
    class Tipo(models.TextChoices):
        ENTRADA = "ENTRADA", "Entrada"
        SAIDA   = "SAIDA", "Saída"
        AJUSTE  = "AJUSTE", "Ajuste"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    medico_id = models.UUIDField(db_index=True)
    produto = models.ForeignKey(Product, on_delete=models.CASCADE, related_name="movimentacoes")
    lote = models.ForeignKey(
        Lot, on_delete=models.SET_NULL, blank=True, null=True, related_name="movimentacoes"
    )
    tipo_movimentacao = models.CharField(max_length=10, choices=Tipo.choices)
    quantidade = models.IntegerField(help_text="ENTRADA/SAIDA > 0; AJUSTE com sinal")
    data_movimentacao = models.DateTimeField(db_index=True)
    origem_destino = models.CharField(max_length=200, blank=True, null=True)
    observacoes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "movimentacoes_estoque"
        indexes = [
            Index(fields=["medico_id", "data_movimentacao"]),
            Index(fields=["produto", "tipo_movimentacao"]),
        ]
        constraints = [
            CheckConstraint(
                condition=(
                    Q(tipo_movimentacao="AJUSTE", quantidade__lt=0)
                    | Q(quantidade__gt=0)
                ),
                name="ck_movimentacao_quantidade_valida",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.tipo_movimentacao} {self.quantidade} → {self.produto_id}"


# ╭──────────────────────────────────────────────╮
# │ 3. Financeiro                                │
# ╰──────────────────────────────────────────────╯
class Charge(models.Model):
    class Status(models.TextChoices):
        PENDENTE  = "PENDENTE", "Pendente"
        PAGO      = "PAGO", "Pago"
        VENCIDO   = "VENCIDO", "Vencido"
        CANCELADO = "CANCELADO", "Cancelado"

    class Metodo(models.TextChoices):
        PIX         = "PIX", "Pix"
        BOLETO      = "BOLETO", "Boleto"
        CREDIT_CARD = "CREDIT_CARD", "Cartão de crédito"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    medico_id = models.UUIDField(db_index=True)
    paciente = models.ForeignKey(Patient, on_delete=models.PROTECT, related_name="cobrancas")
    descricao = models.CharField(max_length=500)
    valor = models.DecimalField(max_digits=12, decimal_places=2)
    data_vencimento = models.DateField()
    metodo_pagamento = models.CharField(max_length=20, choices=Metodo.choices)
    status_cobranca = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDENTE, db_index=True
    )
    asaas_charge_id = models.CharField(max_length=64, blank=True, null=True, unique=True)
    link_pagamento = models.URLField(max_length=500, blank=True, null=True)
    pix_copia_cola = models.TextField(blank=True, null=True)
    qr_code_pix_base64 = models.TextField(blank=True, null=True)
    data_pagamento = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "cobrancas"
        ordering = ["-created_at"]
        indexes = [
            Index(fields=["medico_id", "created_at"]),
            Index(fields=["medico_id", "status_cobranca"]),
        ]
        constraints = [
            CheckConstraint(condition=Q(valor__gt=0), name="ck_cobranca_valor_positivo"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.descricao} [{self.status_cobranca}]"


class FinancialTransaction(models.Model):
    class Tipo(models.TextChoices):
        RECEITA = "RECEITA", "Receita"
        DESPESA = "DESPESA", "Despesa"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    medico_id = models.UUIDField(db_index=True)
    tipo_transacao = models.CharField(max_length=10, choices=Tipo.choices)
    descricao = models.CharField(max_length=500)
    valor = models.DecimalField(max_digits=12, decimal_places=2)
    data_transacao = models.DateField()
    categoria = models.CharField(max_length=100, blank=True, null=True)
    meio_pagamento = models.CharField(max_length=50, blank=True, null=True)
    cobranca = models.ForeignKey(
        Charge, on_delete=models.SET_NULL, blank=True, null=True, related_name="transacoes"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "transacoes_financeiras"
        indexes = [
            Index(fields=["medico_id", "data_transacao"]),
        ]
        constraints = [
            CheckConstraint(condition=Q(valor__gt=0), name="ck_transacao_valor_positivo"),
        ]


class ProviderWebhookEvent(models.Model):
    """Eventos de webhook já aplicados (ids do provedor) para descartar replays."""
    event_id = models.CharField(primary_key=True, max_length=100)
    event = models.CharField(max_length=60)
    charge_id = models.UUIDField(blank=True, null=True, db_index=True)
    outcome = models.CharField(max_length=20)
    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "webhook_eventos_processados"


class PendingReconciliation(models.Model):
    """
    Efeito externo sem contrapartida local (ou vice-versa) que precisa ser
    desfeito no provedor. Resolvido pelo comando `retry_reconciliations`.
    """
    class Kind(models.TextChoices):
        ORPHAN_PROVIDER_CHARGE = "ORPHAN_PROVIDER_CHARGE", "Cobrança órfã no provedor"
        STALE_PROVIDER_CHARGE  = "STALE_PROVIDER_CHARGE", "Cobrança substituída no provedor"

    class Status(models.TextChoices):
        PENDING  = "PENDING", "Pendente"
        RESOLVED = "RESOLVED", "Resolvida"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    kind = models.CharField(max_length=40, choices=Kind.choices)
    medico_id = models.UUIDField(db_index=True)
    local_reference = models.CharField(max_length=64)
    external_id = models.CharField(max_length=64)
    error = models.TextField(blank=True, default="")
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.PENDING, db_index=True)
    attempts = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "reconciliacoes_pendentes"
        ordering = ["created_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.kind} {self.external_id} [{self.status}]"
