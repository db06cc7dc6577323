import contextvars
import uuid

import structlog

_current_request_id = contextvars.ContextVar("current_request_id", default=None)


def set_current_request(request):
    """
    Guarda o id da requisição numa context var e o vincula aos logs
    (structlog contextvars) até `reset_request`.
    """
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    structlog.contextvars.bind_contextvars(request_id=request_id, path=request.path)
    return _current_request_id.set(request_id)


def get_request_id() -> str | None:
    """Id da requisição corrente (None fora de uma requisição)."""
    return _current_request_id.get()


def reset_request(token):
    """Reset context variable to previous state."""
    structlog.contextvars.unbind_contextvars("request_id", "path")
    _current_request_id.reset(token)
