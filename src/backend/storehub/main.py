import asyncio
from contextlib import asynccontextmanager, suppress
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mongoengine import DoesNotExist, NotUniqueError, ValidationError

from storehub.api.v1.router import api_v1_router
from storehub.core.config import settings
from storehub.db.mongodb_utils import connect_to_db, disconnect_from_db
from storehub.exceptions import AuthError, TenantError
from storehub.services.directory import StoreDirectory
from storehub.tenancy import (
    MongoConnectionOpener,
    TenantIdentifier,
    TenantRegistry,
    TenantSchemaRegistry,
)
from storehub.tenancy.registry import prune_idle_periodically
from storehub.utils.logger import get_logger

logger = get_logger(__name__)


def build_registry() -> TenantRegistry:
    return TenantRegistry(
        MongoConnectionOpener(),
        max_connections=settings.TENANT_MAX_CONNECTIONS,
        idle_timeout=settings.TENANT_IDLE_TIMEOUT_SECONDS,
        connect_timeout=settings.TENANT_CONNECT_TIMEOUT_SECONDS,
    )


async def tenant_error_handler(request: Request, exc: TenantError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def auth_error_handler(request: Request, exc: AuthError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def does_not_exist_handler(request: Request, exc: DoesNotExist):
    return JSONResponse(status_code=404, content={"error": str(exc), "code": "NOT_FOUND"})


async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": str(exc), "code": "VALIDATION_ERROR"})


async def not_unique_handler(request: Request, exc: NotUniqueError):
    return JSONResponse(status_code=409, content={"error": str(exc), "code": "DUPLICATE"})


def create_app(
    registry: Optional[TenantRegistry] = None,
    schema_registry: Optional[TenantSchemaRegistry] = None,
    identifier: Optional[TenantIdentifier] = None,
    manage_main_db: bool = True,
) -> FastAPI:
    """
    Builds the application. Tests pass their own registry, identifier and an already
    connected main database.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if manage_main_db:
            connect_to_db()

        pruning = None
        if settings.TENANT_PRUNE_INTERVAL_SECONDS and settings.TENANT_IDLE_TIMEOUT_SECONDS:
            pruning = asyncio.create_task(
                prune_idle_periodically(app.state.tenant_registry, settings.TENANT_PRUNE_INTERVAL_SECONDS)
            )

        try:
            yield
        finally:
            if pruning is not None:
                pruning.cancel()
                with suppress(asyncio.CancelledError):
                    await pruning
            await app.state.tenant_registry.close_all()
            if manage_main_db:
                disconnect_from_db()

    app = FastAPI(title=settings.PROJECT_NAME, version=settings.VERSION, openapi_url="/openapi.json", lifespan=lifespan)

    app.state.tenant_registry = registry or build_registry()
    app.state.schema_registry = schema_registry or TenantSchemaRegistry()
    app.state.tenant_identifier = identifier or TenantIdentifier(StoreDirectory)

    # Set up CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(TenantError, tenant_error_handler)
    app.add_exception_handler(AuthError, auth_error_handler)
    app.add_exception_handler(DoesNotExist, does_not_exist_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(NotUniqueError, not_unique_handler)

    app.include_router(api_v1_router)
    return app


app = create_app()
