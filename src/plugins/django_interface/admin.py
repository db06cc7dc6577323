"""
Admin site registry
-------------------
Registra os modelos de forma dinâmica. Saldo e movimentações ficam
somente leitura: o livro só é alterado pela API.
"""

import structlog
from django.contrib import admin as django_admin

from . import models

logger = structlog.get_logger(__name__)

# ╭──────────────────────────────────────────────╮
# │ Configuração de cada ModelAdmin             │
# ╰──────────────────────────────────────────────╯
MODEL_ADMIN_REGISTRY: dict[type[models.models.Model], dict] = {
    # 1. Pacientes & configurações
    models.Patient: dict(
        list_display=("nome_completo", "cpf", "medico_id", "status_paciente"),
        list_filter=("status_paciente",),
        search_fields=("nome_completo", "cpf", "email_paciente"),
        readonly_fields=("asaas_customer_id",),
    ),
    models.TenantSettings: dict(
        list_display=("medico_id", "asaas_pix_key", "updated_at"),
    ),
    models.ProviderCredential: dict(
        list_display=("medico_id", "provider", "updated_at"),
        exclude=("access_token",),
    ),
    # 2. Estoque
    models.Product: dict(
        list_display=("nome_produto", "tipo_produto", "estoque_atual", "estoque_minimo", "medico_id"),
        list_filter=("tipo_produto",),
        search_fields=("nome_produto", "principio_ativo", "codigo_barras"),
        readonly_fields=("estoque_atual",),
    ),
    models.Lot: dict(
        list_display=("produto", "numero_lote", "data_validade", "quantidade_lote"),
        search_fields=("numero_lote",),
        readonly_fields=("quantidade_lote",),
    ),
    models.StockMovement: dict(
        list_display=("produto", "tipo_movimentacao", "quantidade", "data_movimentacao", "lote"),
        list_filter=("tipo_movimentacao",),
        has_change_permission=lambda self, request, obj=None: False,
        has_delete_permission=lambda self, request, obj=None: False,
    ),
    # 3. Financeiro
    models.Charge: dict(
        list_display=("descricao", "paciente", "valor", "status_cobranca", "data_vencimento", "asaas_charge_id"),
        list_filter=("status_cobranca", "metodo_pagamento"),
        search_fields=("descricao", "asaas_charge_id"),
    ),
    models.FinancialTransaction: dict(
        list_display=("descricao", "tipo_transacao", "valor", "data_transacao"),
        list_filter=("tipo_transacao",),
    ),
    models.ProviderWebhookEvent: dict(
        list_display=("event_id", "event", "charge_id", "outcome", "received_at"),
        list_filter=("event", "outcome"),
    ),
    models.PendingReconciliation: dict(
        list_display=("kind", "external_id", "status", "attempts", "created_at"),
        list_filter=("kind", "status"),
        search_fields=("external_id", "local_reference"),
    ),
}

# ╭──────────────────────────────────────────────╮
# │ Registro dinâmico                           │
# ╰──────────────────────────────────────────────╯
for model, opts in MODEL_ADMIN_REGISTRY.items():
    admin_class = type(f"{model.__name__}Admin", (django_admin.ModelAdmin,), opts)
    django_admin.site.register(model, admin_class)
    logger.debug("Registered model in admin", model=model.__name__)
