"""Configuration loader for the segmerge service."""

import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


class AppInfo(BaseModel):
    """Application metadata."""

    name: str = "segmerge"
    version: str = "1.0.0"
    description: str = (
        "A stateless HTML parsing middleware service for translation workflows"
    )


class ServerConfig(BaseModel):
    """HTTP server configuration."""

    host: str = "0.0.0.0"
    port: int = 8080
    environment: str = "development"
    max_payload_bytes: int = 10 * 1024 * 1024
    request_timeout_seconds: float = 30.0


class AuthConfig(BaseModel):
    """Bearer token settings for the merge endpoint."""

    api_token: str | None = None


class ExtractionConfig(BaseModel):
    """Additions to the built-in tag vocabulary applied to every request."""

    extra_container_tags: list[str] = Field(default_factory=list)
    extra_inline_tags: list[str] = Field(default_factory=list)
    extra_excluded_tags: list[str] = Field(default_factory=list)
    ignored_classes: list[str] = Field(default_factory=list)


class MergeConfig(BaseModel):
    """Merge engine configuration."""

    bilingual_tag: str = "span"
    bilingual_class: str = "segmerge-translation"


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    format: str = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


class AppConfig(BaseModel):
    """Root application configuration."""

    app: AppInfo = Field(default_factory=AppInfo)
    server: ServerConfig = Field(default_factory=ServerConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    merge: MergeConfig = Field(default_factory=MergeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def is_production(self) -> bool:
        return self.server.environment == "production"


def load_config(config_path: str | Path = "config.yaml") -> AppConfig:
    """Load configuration from YAML file and environment variables.

    Environment variables take precedence over the YAML file:
    ``API_BEARER_TOKEN``, ``SEGMERGE_ENV``, ``PORT``, ``MAX_PAYLOAD_SIZE``
    (bytes), ``REQUEST_TIMEOUT`` (milliseconds) and ``LOG_LEVEL``.

    Args:
        config_path: Path to the YAML configuration file.

    Returns:
        Fully populated AppConfig instance.
    """
    load_dotenv()

    yaml_data: dict = {}
    config_file = Path(config_path)
    if config_file.exists():
        with open(config_file) as f:
            yaml_data = yaml.safe_load(f) or {}

    config = AppConfig(**yaml_data)

    # Override from environment
    token = os.getenv("API_BEARER_TOKEN")
    if token:
        config.auth.api_token = token
    if os.getenv("SEGMERGE_ENV"):
        config.server.environment = os.environ["SEGMERGE_ENV"]
    if os.getenv("PORT"):
        config.server.port = int(os.environ["PORT"])
    if os.getenv("MAX_PAYLOAD_SIZE"):
        config.server.max_payload_bytes = int(os.environ["MAX_PAYLOAD_SIZE"])
    if os.getenv("REQUEST_TIMEOUT"):
        config.server.request_timeout_seconds = int(os.environ["REQUEST_TIMEOUT"]) / 1000
    if os.getenv("LOG_LEVEL"):
        config.logging.level = os.environ["LOG_LEVEL"].upper()

    return config


def configure_logging(config: LoggingConfig) -> None:
    """Install a root handler using the configured level and format.

    Args:
        config: LoggingConfig section of the application config.
    """
    logging.basicConfig(level=config.level, format=config.format)
    logging.getLogger().setLevel(config.level)
