import logging
import os
import sys

import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

# chaves cujo valor nunca vai para o log (token do Asaas, segredo do webhook, bearer)
SENSITIVE_KEYS = frozenset({
    "access_token",
    "asaas_access_token",
    "asaas-access-token",
    "authorization",
    "secret",
    "webhook_secret",
    "token",
})

NOISY_LOGGERS = ("urllib3", "django.db.backends", "backoff")


def redact_secrets(_, __, event_dict: dict) -> dict:
    for key in list(event_dict):
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = "***"
    return event_dict


def configure_logging(
    level: str = os.getenv("LOG_LEVEL", "INFO"),
    json_logs: bool = bool(os.getenv("JSON_LOGS", "")),
) -> None:
    """
    Configura structlog + logging:
     - Em `json_logs` ativa JSONRenderer para produção.
     - Caso contrário, usa ConsoleRenderer colorido para dev.
    Deve ser chamado ANTES de qualquer import que crie loggers.
    """

    # Pré-processors comuns a stdlib e structlog
    pre_chain = [
        structlog.contextvars.merge_contextvars,     # request_id do middleware
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
    ]

    final_processor = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            *pre_chain,
            CallsiteParameterAdder(
                parameters=[
                    CallsiteParameter.MODULE,
                    CallsiteParameter.FUNC_NAME,
                    CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,  # ponte para stdlib
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=final_processor,
        foreign_pre_chain=pre_chain,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.captureWarnings(True)
