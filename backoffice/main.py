"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (CORS, request context)
  - Mount back-office routes under /api/v1
  - Expose health check endpoint

Collaborators:
  - api.routes.router: back-office endpoints
  - RequestContextMiddleware: request id and logging context
  - infrastructure.db.pool: opened only for STORAGE_BACKEND=postgres
  - container.seed_local_data: optional local admin seed
  - container.sync_permission_catalogue: permission rows for PostgreSQL

Constraints:
  - CORS configurable via ALLOWED_ORIGINS env var (comma-separated)
  - Env validation enforced at startup (via lifespan, not import time)

Notes:
  - Middleware order matters: RequestContext → CORS → routes
  - /healthz follows Kubernetes health check convention
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .api.routes import router
from .config import get_settings
from .container import seed_local_data, sync_permission_catalogue, use_postgres
from .exception_handlers import register_exception_handlers
from .infrastructure.db.pool import close_pool, init_pool, ping
from .logger import logger
from .middleware import RequestContextMiddleware

API_PREFIX = "/api/v1"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Validates settings and initializes storage."""
    # This will raise ValidationError if env vars are missing/invalid
    settings = get_settings()

    postgres = use_postgres()
    if postgres:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )
        sync_permission_catalogue()
    else:
        seed_local_data()

    logger.info(
        "Back-office API starting up",
        extra={
            "app_env": settings.app_env,
            "storage_backend": "postgres" if postgres else "memory",
            "db_pool_min": settings.db_pool_min_size,
            "db_pool_max": settings.db_pool_max_size,
        },
    )
    yield

    close_pool()
    logger.info("Back-office API shutting down")


def _get_allowed_origins() -> list[str]:
    """Get CORS origins from settings, with fallback for import-time errors."""
    try:
        return get_settings().get_allowed_origins_list()
    except ValueError:
        return ["http://localhost:3000"]


app = FastAPI(
    title="Back-office API",
    version="0.1.0",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "roles", "description": "Institution roles (role:* permissions)"},
        {"name": "permissions", "description": "Permission catalogue"},
        {"name": "assignments", "description": "Institution assignments"},
        {"name": "institutions", "description": "Active institutions (public)"},
        {"name": "users", "description": "User creation and lifecycle (user:create, user:update)"},
        {"name": "authentication", "description": "Access token issuance (JWT)"},
    ],
)

app.add_middleware(RequestContextMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_get_allowed_origins(),
    allow_credentials=False,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-Id"],
)

app.include_router(router, prefix=API_PREFIX)

register_exception_handlers(app)


@app.get("/healthz")
def healthz(request: Request):
    """
    R: Health check.

    Returns:
        ok: True if the storage backend answers
        storage: "memory", "connected" or "disconnected"
        request_id: Correlation ID for this request
    """
    storage = "memory"
    if use_postgres():
        storage = "disconnected"
        try:
            if ping():
                storage = "connected"
        except Exception as e:
            logger.warning("Health check: DB unavailable", extra={"error": str(e)})

    return {
        "ok": storage != "disconnected",
        "storage": storage,
        "request_id": getattr(request.state, "request_id", None),
    }
