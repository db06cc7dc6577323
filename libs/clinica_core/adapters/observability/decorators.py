import time
from functools import wraps

from clinica_core.adapters.observability.metrics import HTTP_REQUEST_COUNT, HTTP_REQUEST_LATENCY


def track_http(view_name):
    """Conta e mede a latência de uma action de ViewSet/APIView."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(self, request, *args, **kwargs):
            start = time.perf_counter()
            status = 500
            try:
                resp = fn(self, request, *args, **kwargs)
                status = resp.status_code
                return resp
            except Exception as exc:
                status = getattr(exc, "status_code", 500)
                raise
            finally:
                labels = (request.method, view_name, str(status))
                HTTP_REQUEST_COUNT.labels(*labels).inc()
                HTTP_REQUEST_LATENCY.labels(*labels).observe(time.perf_counter() - start)
        return wrapper
    return decorator
