from prometheus_client import Counter, Histogram

# HTTP (views REST)
HTTP_REQUEST_LATENCY = Histogram(
    'clinica_request_duration_seconds',
    'Latência de requisições HTTP',
    ['method', 'view', 'status'],
)
HTTP_REQUEST_COUNT = Counter(
    'clinica_requests_total',
    'Total de requisições HTTP',
    ['method', 'view', 'status'],
)

# Estoque
STOCK_MOVEMENTS = Counter(
    'estoque_movimentacoes_total',
    'Movimentações registradas no livro-razão',
    ['tipo'],
)
STOCK_REJECTIONS = Counter(
    'estoque_movimentacoes_rejeitadas_total',
    'Movimentações recusadas por saldo/lote insuficiente',
    ['motivo'],
)

# Gateway de pagamentos
PROVIDER_REQUESTS = Counter(
    'asaas_requests_total',
    'Chamadas ao Asaas',
    ['operation', 'outcome'],
)
PROVIDER_LATENCY = Histogram(
    'asaas_request_duration_seconds',
    'Latência das chamadas ao Asaas',
    ['operation'],
)

# Webhook / reconciliação
WEBHOOK_EVENTS = Counter(
    'asaas_webhook_events_total',
    'Eventos de webhook recebidos',
    ['event', 'outcome'],
)
RECONCILIATIONS_OPENED = Counter(
    'reconciliacoes_abertas_total',
    'Falhas parciais registradas para reconciliação',
    ['kind'],
)
