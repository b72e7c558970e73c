"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Required fields (CLERK_SECRET_KEY, Firestore
credentials when the firestore backend is selected) are validated at
load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_DATABASE_BACKENDS = ("firestore", "memory")
_STORAGE_BACKENDS = ("local", "s3")
_IDENTITY_PROVIDERS = ("clerk",)
_TOKEN_SOURCES = ("header", "body")


class Settings(BaseSettings):
    """Portal settings loaded from environment and .env.

    Comma-separated values (origins, department codes, authorized parties)
    are kept as strings and split by the *_list properties.
    """

    # App
    app_name: str = "resource-portal"
    app_version: str = "1.0.0"
    debug: bool = False

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Database: "firestore" (REST) or "memory" (single process, tests and local dev)
    database_backend: str = "firestore"
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None

    # Identity provider
    identity_provider: str = "clerk"
    clerk_secret_key: SecretStr = SecretStr("")
    clerk_api_url: str = "https://api.clerk.com/v1"
    # PEM public key; when set, tokens are verified without fetching JWKS.
    clerk_jwt_key: str | None = None
    clerk_authorized_parties: str = ""
    identity_provider_timeout_seconds: float = 5.0

    # Sign-in policy
    institution_domain: str = "ddu.ac.in"
    faculty_department_codes: str = "it,ce,ec,ic,ch,mh,cl"
    allow_self_registration: bool = False
    sign_in_token_source: str = "header"
    sign_in_conflict_retries: int = 2

    # Storage
    storage_backend: str = "local"
    storage_root: str = "/var/portal/storage"
    storage_base_url: str | None = None
    s3_bucket: str | None = None
    s3_region: str = "us-east-1"
    s3_endpoint_url: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    upload_folder: str = "it_hub_files"
    max_upload_size: int = 25 * 1024 * 1024  # 25MB

    # Request / middleware
    request_timeout_seconds: int = 60
    request_id_header: str = "X-Request-ID"
    rate_limit_enabled: bool = True

    # OpenTelemetry
    telemetry_enabled: bool = True
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        return _split_csv(self.allowed_origins)

    @property
    def faculty_department_codes_list(self) -> list[str]:
        return [code.lower() for code in _split_csv(self.faculty_department_codes)]

    @property
    def clerk_authorized_parties_list(self) -> list[str]:
        return _split_csv(self.clerk_authorized_parties)

    @model_validator(mode="after")
    def validate_required_and_backends(self) -> "Settings":
        """Validate required secrets and backend selections.

        - Firestore: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH required.
        - Clerk: CLERK_SECRET_KEY required.
        - S3 storage: S3_BUCKET required.
        """
        if self.database_backend not in _DATABASE_BACKENDS:
            raise ValueError(
                f"database_backend must be one of {_DATABASE_BACKENDS}, "
                f"got: {self.database_backend!r}"
            )
        if self.database_backend == "firestore":
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "When database_backend is 'firestore', set FIREBASE_SERVICE_ACCOUNT_KEY "
                    "(full JSON string) or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        if self.identity_provider not in _IDENTITY_PROVIDERS:
            raise ValueError(
                f"identity_provider must be one of {_IDENTITY_PROVIDERS}, "
                f"got: {self.identity_provider!r}"
            )
        if not self.clerk_secret_key.get_secret_value():
            raise ValueError(
                "CLERK_SECRET_KEY is required. Copy it from the identity provider "
                "dashboard (API keys) into the environment or .env file."
            )
        if self.sign_in_token_source not in _TOKEN_SOURCES:
            raise ValueError(
                f"sign_in_token_source must be one of {_TOKEN_SOURCES}, "
                f"got: {self.sign_in_token_source!r}"
            )
        if self.sign_in_conflict_retries < 0:
            raise ValueError("sign_in_conflict_retries must be >= 0")
        if not self.institution_domain.strip():
            raise ValueError("INSTITUTION_DOMAIN must not be empty")
        if self.storage_backend == "s3":
            if not self.s3_bucket:
                raise ValueError(
                    "s3_bucket is required when storage_backend is 's3'. "
                    "Set S3_BUCKET environment variable or update .env file."
                )
        elif self.storage_backend not in _STORAGE_BACKENDS:
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                "Must be one of: 'local', 's3'"
            )
        return self


def _split_csv(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
