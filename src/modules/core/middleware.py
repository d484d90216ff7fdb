import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger()

# Stripe calls the webhook with its own request id; keep it so a webhook
# delivery can be matched with the processor's dashboard.
_STRIPE_REQUEST_HEADER = "HTTP_STRIPE_REQUEST_ID"


class RequestContextMiddleware:
    """Bind per-request context (correlation ID, origin) to structlog.

    Reads ``X-Request-ID`` from the incoming request, or generates a UUID4
    when absent.  The ID is stored in a ContextVar so every log line of the
    request (checkout, verification, status updates) carries it, and it is
    echoed back in the ``X-Request-ID`` response header.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)

        stripe_request_id = request.META.get(_STRIPE_REQUEST_HEADER)
        if stripe_request_id:
            structlog.contextvars.bind_contextvars(stripe_request_id=stripe_request_id)

        logger.info(
            "request_started",
            method=request.method,
            path=request.get_full_path(),
            origin=request.META.get("HTTP_ORIGIN", ""),
        )

        response = self.get_response(request)

        logger.info(
            "request_finished",
            method=request.method,
            path=request.get_full_path(),
            status_code=response.status_code,
        )

        response["X-Request-ID"] = cid
        return response
