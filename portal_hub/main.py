import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text

import portal_hub.models  # noqa: F401  registers tables on Base.metadata
from portal_hub.core.config import settings
from portal_hub.core.database import Base, SessionLocal, engine
from portal_hub.core.errors import PartialFailureError, PortalError
from portal_hub.core.minio_client import create_minio_client, initialize_minio_bucket
from portal_hub.gateway import Gateway, build_gateway
from portal_hub.monitoring.setup import setup_monitoring
from portal_hub.routes import auth, documents, links, memos, ui
from portal_hub.services.registry import WorkflowRegistry

logger = logging.getLogger("portal-hub")


def configure_logging(level: str = settings.LOG_LEVEL) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def portal_error_handler(request: Request, exc: PortalError):
    content = {"detail": exc.message, "error": type(exc).__name__}
    if isinstance(exc, PartialFailureError):
        content["storage_path"] = exc.storage_path
        content["operation"] = exc.operation
    if exc.status_code >= 500:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=content)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if getattr(app.state, "gateway", None) is not None:
        yield
        return

    try:
        async with engine.begin() as conn:
            logger.info("Creating database tables:")
            for table in Base.metadata.tables.values():
                logger.info(f" - Table: {table.name}")
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        raise

    minio_client = create_minio_client()
    try:
        initialize_minio_bucket(minio_client, settings.MINIO_BUCKET)
        logger.info("MinIO initialized")
    except Exception as e:
        logger.error(f"MinIO initialization failed: {e}")
        raise

    gateway = build_gateway(SessionLocal, minio_client, settings.MINIO_BUCKET)
    if settings.PORTAL_USER_EMAIL and settings.PORTAL_USER_PASSWORD:
        try:
            await gateway.identity.ensure_account(settings.PORTAL_USER_EMAIL, settings.PORTAL_USER_PASSWORD)
        except PortalError as e:
            logger.error(f"Seeding portal account failed: {e.message}")

    app.state.gateway = gateway
    app.state.workflows = WorkflowRegistry(gateway, settings)
    app.state.minio_client = minio_client

    yield

    await engine.dispose()
    logger.info("Application shutdown complete")


def create_app(gateway: Gateway | None = None, instrument: bool = True) -> FastAPI:
    """Build the portal app. Passing a gateway skips database and MinIO setup."""
    configure_logging()

    app = FastAPI(
        title="Portal Hub",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.gateway = gateway
    if gateway is not None:
        app.state.workflows = WorkflowRegistry(gateway, settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "Content-Length"],
    )
    app.add_exception_handler(PortalError, portal_error_handler)

    app.include_router(auth)
    app.include_router(documents)
    app.include_router(links)
    app.include_router(memos)
    app.include_router(ui)

    setup_monitoring(app, instrument=instrument)

    @app.get("/health")
    async def health_check():
        try:
            async with SessionLocal() as session:
                await session.execute(text("SELECT 1"))
            db_status = "ok"
        except Exception as e:
            db_status = f"error: {str(e)}"

        minio_client = getattr(app.state, "minio_client", None)
        if minio_client is None:
            minio_status = "not configured"
        else:
            try:
                minio_client.bucket_exists(bucket_name=settings.MINIO_BUCKET)
                minio_status = "ok"
            except Exception as e:
                minio_status = f"error: {str(e)}"

        return {
            "status": "running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": db_status,
            "storage": minio_status
        }

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info",
        timeout_keep_alive=60,
        limit_concurrency=100
    )
