"""Runtime settings for the finance-tagger backend.

Precedence, highest first: constructor arguments, the OS keychain (Plaid
credentials only), environment variables, then ``.env``.
"""

from typing import Any

from pydantic import field_validator
from pydantic.fields import FieldInfo
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

from services.credential_manager import CREDENTIAL_KEYS, get_credential

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class KeychainSettingsSource(PydanticBaseSettingsSource):
    """Settings source that reads Plaid credentials stored with ``scripts/setup_plaid.py``.

    Fields outside :data:`~services.credential_manager.CREDENTIAL_KEYS` are
    never looked up, and missing entries are left to later sources.
    """

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        key = field_name.upper()
        value = get_credential(key) if key in CREDENTIAL_KEYS else None
        return value, field_name, False

    def __call__(self) -> dict[str, Any]:
        found = {}
        for field_name, field in self.settings_cls.model_fields.items():
            value, name, _ = self.get_field_value(field, field_name)
            if value is not None:
                found[name] = value
        return found


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = "sqlite:///./finance.db"

    PLAID_CLIENT_ID: str = ""
    PLAID_SECRET: str = ""
    # sandbox | production
    PLAID_ENVIRONMENT: str = "sandbox"
    PLAID_CLIENT_NAME: str = "Finance Tagger"
    # Public URL Plaid calls with SYNC_UPDATES_AVAILABLE
    PLAID_WEBHOOK_URL: str = ""

    # Comma-separated
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173"

    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        keychain = KeychainSettingsSource(settings_cls)
        return init_settings, keychain, env_settings, dotenv_settings, file_secret_settings

    @field_validator("PLAID_ENVIRONMENT", mode="before")
    @classmethod
    def normalize_environment(cls, v):
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {v!r}")
        return level

    @property
    def cors_origins(self) -> list[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
