from clinica_core.adapters.context.request_context import get_request_id, reset_request, set_current_request


class RequestContextMiddleware:
    """Binds a request id to the logging context and echoes it back in the response."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        token = set_current_request(request)
        try:
            response = self.get_response(request)
            response["X-Request-ID"] = get_request_id()
        finally:
            reset_request(token)
        return response
