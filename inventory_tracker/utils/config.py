"""Configuration management using pydantic-settings."""

from functools import lru_cache
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class APIConfig(BaseModel):
    """HTTP client settings."""
    timeout: int = 30
    max_retries: int = 3
    retry_delay: int = 1
    exponential_backoff: bool = True


class StorageConfig(BaseModel):
    """JSON document settings."""
    indent: int = 2
    seed_on_first_run: bool = True


class InventoryConfig(BaseModel):
    """Inventory display settings."""
    low_stock_threshold: int = 5


class LoggingFilesConfig(BaseModel):
    """Log file paths."""
    store: str = "logs/store.log"
    server: str = "logs/server.log"
    api: str = "logs/api.log"
    error: str = "logs/error.log"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    max_bytes: int = 10485760  # 10MB
    backup_count: int = 5
    files: LoggingFilesConfig = LoggingFilesConfig()


class YAMLConfig(BaseModel):
    """Configuration loaded from YAML file."""
    api: APIConfig = APIConfig()
    storage: StorageConfig = StorageConfig()
    inventory: InventoryConfig = InventoryConfig()
    logging: LoggingConfig = LoggingConfig()


class Settings(BaseSettings):
    """Application settings from environment variables."""

    # Server settings
    host: str = Field(default="0.0.0.0", description="Bind address")
    port: int = Field(default=3000, description="Server port")
    cors_origins: List[str] = Field(default=["*"], description="Allowed CORS origins")

    # Storage settings
    data_file: str = Field(default="data/inventory.json", description="Path of the inventory JSON document")

    # Client settings
    api_url: str = Field(default="http://localhost:3000/api", description="Base URL of a running inventory API")

    # Application settings
    environment: str = Field(default="development", description="Environment (development/production)")
    log_level: Optional[str] = Field(default=None, description="Override log level")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INVENTORY_",
        case_sensitive=False,
        extra="ignore"
    )


class AppConfig:
    """Combined application configuration."""

    def __init__(self):
        self.env = Settings()

        # Load YAML config
        config_path = Path(__file__).parent.parent.parent / "config" / "config.yml"
        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    yaml_data = yaml.safe_load(f) or {}
                self.yaml = YAMLConfig(**yaml_data)
            except (yaml.YAMLError, ValidationError) as e:
                raise ConfigurationError(
                    f"Invalid configuration file: {config_path}",
                    details={"error": str(e)}
                )
        else:
            self.yaml = YAMLConfig()

        # Override log level if specified in env
        if self.env.log_level:
            self.yaml.logging.level = self.env.log_level

    @property
    def api(self) -> APIConfig:
        return self.yaml.api

    @property
    def storage(self) -> StorageConfig:
        return self.yaml.storage

    @property
    def inventory(self) -> InventoryConfig:
        return self.yaml.inventory

    @property
    def logging(self) -> LoggingConfig:
        return self.yaml.logging

    @property
    def data_file(self) -> Path:
        return Path(self.env.data_file)

    @property
    def is_production(self) -> bool:
        return self.env.environment.lower() == "production"


@lru_cache()
def get_config() -> AppConfig:
    """Get cached configuration instance."""
    return AppConfig()
