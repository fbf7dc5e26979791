"""
Name: Application Configuration (Settings)

Responsibilities:
  - Centralized, typed configuration using pydantic-settings
  - Validate environment variables at startup
  - Provide defaults for local development (in-memory storage)

Collaborators:
  - main.py: reads settings for CORS and pool startup
  - container.py: picks the storage backend
  - identity/auth_users.py: reads JWT secret and TTL

Constraints:
  - Lives in API/infrastructure layer, NOT in domain/application
  - No business logic, pure configuration

Notes:
  - Uses pydantic-settings for env parsing and validation
  - Singleton via lru_cache
"""

from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_STORAGE_BACKENDS = {"memory", "postgres"}


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        app_env: Application environment (development/test/production)
        storage_backend: "memory" or "postgres"
        database_url: PostgreSQL connection string (required for postgres)
        db_pool_min_size: Minimum pooled connections
        db_pool_max_size: Maximum pooled connections
        db_statement_timeout_ms: Statement timeout applied per connection
        jwt_secret: Secret for signing access tokens
        jwt_access_ttl_minutes: Access token TTL in minutes
        jwt_issuer: Issuer claim written into access tokens
        log_level: Root level for the application logger
        log_json: Emit JSON logs (default: True)
        allowed_origins: Comma-separated CORS origins
        default_page_size: Page size used when a list request omits it
        max_page_size: Upper bound accepted for list requests
        dev_seed_admin: Seed an institution + admin user on startup (local only)
        dev_seed_admin_email: Seeded admin email
        dev_seed_admin_password: Seeded admin password (required when seeding)
        dev_seed_institution_name: Seeded institution name
    """

    # Environment
    app_env: str = "development"

    # Storage
    storage_backend: str = "memory"
    database_url: str = ""

    # Database - Connection Pool
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10
    db_statement_timeout_ms: int = 30000  # 30 seconds

    # Security - JWT Auth
    jwt_secret: str = "dev-secret"
    jwt_access_ttl_minutes: int = 30
    jwt_issuer: str = "backoffice"

    # Logging
    log_level: str = "INFO"
    log_json: bool = True

    # CORS configuration
    allowed_origins: str = "http://localhost:3000"

    # Listing limits
    default_page_size: int = 10
    max_page_size: int = 100

    # Dev seed (in-memory backend, local only)
    dev_seed_admin: bool = False
    dev_seed_admin_email: str = "admin@backoffice.local"
    dev_seed_admin_password: str = ""
    dev_seed_institution_name: str = "Local Institution"

    @field_validator("storage_backend")
    @classmethod
    def storage_backend_must_be_known(cls, v: str) -> str:
        backend = (v or "memory").strip().lower()
        if backend not in _STORAGE_BACKENDS:
            raise ValueError("storage_backend must be memory or postgres")
        return backend

    @field_validator("db_pool_min_size", "db_pool_max_size")
    @classmethod
    def pool_size_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("pool sizes must be greater than 0")
        return v

    @field_validator("default_page_size", "max_page_size")
    @classmethod
    def page_size_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("page sizes must be greater than 0")
        return v

    @model_validator(mode="after")
    def validate_cross_fields(self):
        if self.db_pool_min_size > self.db_pool_max_size:
            raise ValueError(
                f"db_pool_min_size ({self.db_pool_min_size}) must not exceed "
                f"db_pool_max_size ({self.db_pool_max_size})"
            )
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size must not exceed max_page_size")
        if self.storage_backend == "postgres" and not self.database_url.strip():
            raise ValueError("DATABASE_URL is required when STORAGE_BACKEND=postgres")
        if self.dev_seed_admin and not self.dev_seed_admin_password:
            raise ValueError("DEV_SEED_ADMIN_PASSWORD is required when DEV_SEED_ADMIN=1")
        return self

    @model_validator(mode="after")
    def validate_security_requirements(self):
        if not self.is_production():
            return self

        insecure_secrets = {"dev-secret", "changeme", "change-me", "password"}
        jwt_secret = (self.jwt_secret or "").strip()
        if not jwt_secret or jwt_secret in insecure_secrets:
            raise ValueError(
                "JWT_SECRET must be set to a strong, non-default value in production"
            )
        if len(jwt_secret) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters in production")
        return self

    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    def get_allowed_origins_list(self) -> list[str]:
        """Parse comma-separated origins into a list."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get singleton Settings instance.

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()
