"""
Configuration management with schema validation.
Single source of truth for DriveDoc configuration.

Settings come from config/settings.yaml (override the path with
DRIVEDOC_SETTINGS). String values of the form ${VAR} or ${VAR:default}
are substituted from the environment, which is populated from .env first.
"""

import os
from pathlib import Path
from typing import Any, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigError

load_dotenv()

DEFAULT_SETTINGS_FILE = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"


class AppSettings(BaseModel):
    name: str = "DriveDoc"
    version: str = "1.0.0"
    environment: str = "production"

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"


class DatabaseSettings(BaseModel):
    uri: str = "mongodb://localhost:27017"
    name: str = "drivedoc"
    server_selection_timeout_ms: int = 5000


class AuthSettings(BaseModel):
    secret: str = ""
    token_expiry_days: int = 7
    cookie_name: str = "token"
    salt: str = "drivedoc-auth"


class PushSettings(BaseModel):
    vapid_public_key: str = ""
    vapid_private_key: str = ""
    contact: str = "mailto:admin@example.com"

    @property
    def configured(self) -> bool:
        return bool(self.vapid_public_key and self.vapid_private_key)


class CorsSettings(BaseModel):
    allowed_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    client_url: Optional[str] = None

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    def origins(self) -> List[str]:
        """Allowed origins with trailing slashes removed, client_url appended once."""
        out = [o.rstrip("/") for o in self.allowed_origins]
        if self.client_url:
            client = self.client_url.rstrip("/")
            if client and client not in out:
                out.append(client)
        return out


class NotificationSettings(BaseModel):
    enabled: bool = True
    soon_days: int = Field(default=30, ge=0)
    interval_seconds: int = Field(default=3600, gt=0)
    dev_interval_seconds: int = Field(default=60, gt=0)


class PaymentSettings(BaseModel):
    paystack_secret_key: str = ""
    paystack_base_url: str = "https://api.paystack.co"
    timeout_seconds: int = 30


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "json"
    file_path: Optional[str] = None
    max_bytes: int = 10485760
    backup_count: int = 5


class Settings(BaseModel):
    app: AppSettings = Field(default_factory=AppSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    push: PushSettings = Field(default_factory=PushSettings)
    cors: CorsSettings = Field(default_factory=CorsSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)
    payments: PaymentSettings = Field(default_factory=PaymentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def scan_interval_seconds(self) -> int:
        """Short interval in development, the regular one otherwise."""
        if self.app.is_development:
            return self.notifications.dev_interval_seconds
        return self.notifications.interval_seconds


class ConfigManager:
    """Loads and validates settings.yaml"""

    def __init__(self, settings_path: Optional[Path] = None):
        env_path = os.getenv("DRIVEDOC_SETTINGS")
        self.settings_path = Path(settings_path or env_path or DEFAULT_SETTINGS_FILE)

    def _substitute_env_vars(self, value: Any) -> Any:
        """Recursively substitute environment variables"""
        if isinstance(value, str):
            if value.startswith("${") and value.endswith("}"):
                var_expr = value[2:-1]
                if ":" in var_expr:
                    var_name, default = var_expr.split(":", 1)
                    return os.getenv(var_name.strip(), default.strip())
                # Unset variable without a default means "use the model default"
                return os.getenv(var_expr)
        elif isinstance(value, dict):
            return {k: self._substitute_env_vars(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [self._substitute_env_vars(item) for item in value]
        return value

    @staticmethod
    def _drop_unset(value: Any) -> Any:
        if isinstance(value, dict):
            return {k: ConfigManager._drop_unset(v) for k, v in value.items() if v is not None}
        return value

    def load_settings(self) -> Settings:
        """Load settings.yaml; falls back to model defaults when the file is absent."""
        raw_data: dict = {}
        if self.settings_path.exists():
            try:
                with open(self.settings_path, "r", encoding="utf-8") as f:
                    raw_data = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(f"Failed to read settings from {self.settings_path}: {e}")

        processed = self._drop_unset(self._substitute_env_vars(raw_data))
        try:
            return Settings(**processed)
        except ValueError as e:
            raise ConfigError(f"Invalid settings in {self.settings_path}: {e}")


# Global instance
config_manager = ConfigManager()
