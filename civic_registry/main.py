from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from civic_registry.api.admin.budget import router as budget_router
from civic_registry.api.admin.officials import router as officials_router
from civic_registry.api.citizens import router as citizens_router
from civic_registry.api.registry import router as registry_router
from civic_registry.api.service_requests import router as service_requests_router
from civic_registry.core.config import Settings, get_settings
from civic_registry.core.errors import RegistryError
from civic_registry.core.logging import configure_logging


async def registry_error_handler(request: Request, exc: RegistryError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        yield

    app = FastAPI(title=settings.app_name, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RegistryError, registry_error_handler)

    app.include_router(registry_router)
    app.include_router(citizens_router)
    app.include_router(service_requests_router)

    # administrator-gated routers
    app.include_router(officials_router)
    app.include_router(budget_router)

    @app.get("/")
    def root():
        return {"ok": True, "docs": "/docs"}

    return app


app = create_app()
