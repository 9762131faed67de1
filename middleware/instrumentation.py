"""Request instrumentation middleware"""
import time
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from metrics.signals import GoldenSignals
from logging_config import get_logger


logger = get_logger(__name__)


class GoldenSignalsMiddleware(BaseHTTPMiddleware):
    """Record request count, errors and latency for every request

    Unhandled exceptions and 5xx responses count as errors and record no
    latency; anything else sets the latency gauge in milliseconds.
    """

    def __init__(self, app, signals: GoldenSignals):
        super().__init__(app)
        self.signals = signals

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        with self.signals.track() as outcome:
            response = await call_next(request)
            if response.status_code >= 500:
                outcome.fail()
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Log HTTP requests"""
        start_time = time.time()

        try:
            response = await call_next(request)

            process_time = time.time() - start_time
            logger.info(
                "HTTP request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                process_time_seconds=round(process_time, 3),
                client_ip=request.client.host if request.client else None,
                event_type="http_request_complete"
            )

            # Add processing time header
            response.headers["X-Process-Time"] = str(round(process_time, 3))

            return response

        except Exception as e:
            process_time = time.time() - start_time
            logger.error(
                "HTTP request failed",
                method=request.method,
                path=request.url.path,
                error=str(e),
                process_time_seconds=round(process_time, 3),
                client_ip=request.client.host if request.client else None,
                event_type="http_request_error",
                exc_info=True
            )
            raise
