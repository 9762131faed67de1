"""Configuration management for the golden signals exporter"""
from pathlib import Path
from typing import List, Literal, Optional
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Config(BaseSettings):
    """Configuration class with Pydantic validation and environment-based settings"""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False, populate_by_name=True)

    # Service identification
    service_name: str = Field(default="golden-signals-exporter", description="Service name")
    service_version: str = Field(default="1.0.0", description="Service version")
    origin: str = Field(default="dev", min_length=1, description="Value of the origin label on golden signals")

    # Application listener
    app_host: str = Field(default="0.0.0.0", description="Application server host")
    app_port: int = Field(default=8000, ge=1, le=65535, description="Application server port")

    # Exposition listener
    metrics_host: str = Field(default="0.0.0.0", description="Metrics server host")
    metrics_port: int = Field(default=9100, ge=1, le=65535, description="Metrics server port")
    include_timestamps: bool = Field(default=False, description="Append sample timestamps to exposition lines")

    # Collector settings
    enabled_collectors_str: str = Field(
        default="process",
        validation_alias="enabled_collectors",
        description="Enabled collectors (comma-separated)"
    )

    # Textfile export (disabled unless a path is given)
    prometheus_file: Optional[Path] = Field(default=None, description="Prometheus textfile path")
    export_interval: int = Field(default=15, ge=1, description="Textfile export interval in seconds")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", description="Log level")
    log_file: Optional[Path] = Field(default=None, description="Log file path")
    environment: Literal["development", "production"] = Field(default="production", description="Selects the log renderer")
    enable_request_logging: bool = Field(default=True, description="Enable HTTP request logging")

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator('environment', mode='before')
    @classmethod
    def normalize_environment(cls, v):
        if isinstance(v, str):
            return v.lower()
        return v

    @field_validator('prometheus_file', 'log_file')
    @classmethod
    def ensure_parent_directories(cls, v):
        """Ensure parent directories exist for file paths"""
        if isinstance(v, Path):
            v.parent.mkdir(parents=True, exist_ok=True)
        return v

    @model_validator(mode='after')
    def validate_ports(self):
        """Exposition must not share the application listener"""
        if self.app_port == self.metrics_port:
            raise ValueError(f"METRICS_PORT must differ from APP_PORT (both {self.app_port})")
        return self

    @property
    def enabled_collectors(self) -> List[str]:
        """Get enabled collectors as a list"""
        return [item.strip() for item in self.enabled_collectors_str.split(',') if item.strip()]

    def is_collector_enabled(self, collector_name: str) -> bool:
        """Check if a specific collector is enabled"""
        return collector_name in self.enabled_collectors

    def is_textfile_export_enabled(self) -> bool:
        return self.prometheus_file is not None

    def is_development(self) -> bool:
        return self.environment == "development"
