from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """application settings with environment variables support"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # server
    host: str = Field(default="0.0.0.0", description="host to bind")
    port: int = Field(default=8080, ge=1, le=65535, description="port to bind")

    # logging
    log_level: str = Field(default="INFO", description="logging level")
    log_format: str = Field(default="json", description="log format: json or console")

    # resource
    service_name: str = Field(default="sample-app", description="service name for telemetry")
    service_version: str = Field(default="1.0.0", description="service version for telemetry")

    # telemetry
    otlp_endpoint: str = Field(
        default="otel-collector:4317",
        validation_alias=AliasChoices("otel_exporter_otlp_endpoint", "otlp_endpoint"),
        description="otlp grpc collector endpoint",
    )
    metric_export_interval_ms: int = Field(
        default=60000, ge=1, description="periodic metric export interval in milliseconds"
    )
    shutdown_timeout_ms: int = Field(
        default=30000, ge=0, description="deadline for draining exporters on shutdown"
    )

    # metrics
    enable_metrics: bool = Field(default=True, description="enable prometheus metrics")


settings = Settings()
