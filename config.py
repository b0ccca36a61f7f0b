from typing import Any, Optional

from pydantic import AliasChoices, Field, PrivateAttr, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsError

from schemas.relay import DeliveryEncoding, PayloadMode, RelayMode
from services.errors import ConfigurationError


class Settings(BaseSettings):
    app_name: str = "Loan Intake Relay API"
    debug: bool = False
    environment: str = "development"

    database_url: str = "sqlite+aiosqlite:///./intake.db"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"

    # Admin gate: a single shared secret presented in the admin_token cookie
    admin_token: Optional[str] = None

    # Outbound relay to the lender intake endpoint
    privatelender_endpoint_url: Optional[str] = None
    relay_mode: RelayMode = RelayMode.PREVIEW
    privatelender_payload_mode: PayloadMode = PayloadMode.FLAT
    privatelender_content_type: DeliveryEncoding = DeliveryEncoding.FORM
    privatelender_two_stage: bool = False
    # JSON-encoded in the environment; decoded once at startup
    privatelender_field_map_json: Optional[dict[str, str]] = None
    privatelender_static_fields_json: Optional[dict[str, Any]] = None
    privatelender_headers_json: Optional[dict[str, str]] = None
    injected_email: Optional[str] = Field(
        None, validation_alias=AliasChoices("INJECTED_EMAIL", "RELAY_EMAIL")
    )

    # New-submission notification (SendGrid API or SMTP)
    sendgrid_transport: str = "api"
    sendgrid_api_key: Optional[str] = None
    sendgrid_api_url: str = "https://api.sendgrid.com/v3/mail/send"
    submission_notify_to: Optional[str] = None
    submission_notify_from: Optional[str] = None
    smtp_host: Optional[str] = None
    smtp_port: Optional[int] = None
    smtp_secure: Optional[bool] = None
    smtp_user: Optional[str] = None
    smtp_pass: Optional[str] = None

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    _is_sqlite: bool = PrivateAttr(default=False)

    @field_validator("relay_mode", "privatelender_payload_mode", "privatelender_content_type", mode="before")
    @classmethod
    def _lowercase_enum(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("injected_email", "admin_token", "privatelender_endpoint_url", mode="before")
    @classmethod
    def _blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def model_post_init(self, __context: object) -> None:
        _scheme = self.database_url.split(":")[0].lower()
        object.__setattr__(self, "_is_sqlite", "sqlite" in _scheme)

    @property
    def is_sqlite(self) -> bool:
        return self._is_sqlite

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


def load_settings(**overrides: Any) -> Settings:
    """Build settings from the environment; malformed values fail at startup."""
    try:
        return Settings(**overrides)
    except (SettingsError, ValidationError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e


settings = load_settings()


def get_settings() -> Settings:
    """FastAPI dependency; overridden in tests."""
    return settings
