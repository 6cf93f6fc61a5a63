from pathlib import Path
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

class AppSettings(BaseSettings):
    name: str = "Campaign Feed"
    version: str = "1.0.0"
    campaign_name: str = "Shubham Campaign"


class PathSettings(BaseSettings):
    cache_dir: Path = Path("./data/sync_cache")
    output_dir: Path = Path("./reports")


class SheetSettings(BaseSettings):
    enabled: bool = True
    sheet_id: str = "18fCHeqsvt7FIpXNBAHNj-AssUAKSRRJOFXugL1s-Wp4"
    sheet_name: str = "Form Responses 1"
    service_account_file: Optional[Path] = None
    api_key: Optional[str] = None
    max_retries: int = 3
    backoff_seconds: float = 1.0
    timeout_seconds: float = 20.0


class SecuritySettings(BaseSettings):
    """
    Optional auth and request guardrails.
    """
    api_token: Optional[str] = None  # Bearer token or X-API-Key
    max_upload_mb: int = 15  # Upload cap; 0 disables it

    @property
    def max_upload_bytes(self) -> int:
        return max(self.max_upload_mb, 0) * 1024 * 1024


class LoggingSettings(BaseSettings):
    log_requests: bool = True
    level: str = "INFO"


class AISettings(BaseSettings):
    enabled: bool = False
    provider: str = "offline"  # offline|http
    base_url: Optional[str] = None  # used when provider=http
    api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    max_tokens: int = 600  # summary is capped at ~300 words
    cache_ttl_minutes: int = 60
    temperature: float = 0.2
    max_context_chars: int = 20000


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_nested_delimiter="__", env_file=".env", extra="ignore")
    app: AppSettings = AppSettings()
    paths: PathSettings = PathSettings()
    sheets: SheetSettings = SheetSettings()
    security: SecuritySettings = SecuritySettings()
    logging: LoggingSettings = LoggingSettings()
    ai: AISettings = AISettings()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Settings":
        # Load from default path if exists
        default_path = Path("config/settings.yaml")
        path = config_path or (default_path if default_path.exists() else None)

        if not path:
            return cls()

        with open(path, "r") as f:
            config_data = yaml.safe_load(f) or {}

        return cls(**config_data)

settings = Settings.load()
