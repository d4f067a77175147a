import logging
import time

from fastapi import Request
from fastapi.responses import JSONResponse
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator
from starlette.types import ASGIApp

logger = logging.getLogger("portal-hub")

document_operations = Counter(
    "portal_document_operations_total",
    "Document workflow operations by outcome",
    ["operation", "outcome"],
)
partial_failures = Counter(
    "portal_partial_failures_total",
    "Two-step operations that left blob and record stores out of sync",
    ["operation"],
)


def report_document_operation(operation: str, outcome: str) -> None:
    document_operations.labels(operation=operation, outcome=outcome).inc()


def report_partial_failure(operation: str) -> None:
    partial_failures.labels(operation=operation).inc()


def setup_monitoring(app: ASGIApp, instrument: bool = True):
    if instrument:
        Instrumentator().instrument(app).expose(app, endpoint="/api/metrics", include_in_schema=False)

    @app.middleware("http")
    async def monitor_requests(request: Request, call_next):
        start_time = time.time()
        response = None
        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception("Unhandled error: %s %s -> %s", request.method, request.url.path, e)
            response = JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
        finally:
            process_time = time.time() - start_time
            logger.info("method=%s path=%s status=%s duration=%.4fs",
                        request.method, request.url.path,
                        getattr(response, "status_code", "?"), process_time)
        return response
