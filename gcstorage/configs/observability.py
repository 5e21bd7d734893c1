"""Observability config."""

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ObservabilityConfig(BaseSettings):
    """Observability configuration.

    This config is used by `gcstorage.observability.setupper.ObservabilitySetupper` to wire the
    storage client into logging and OpenTelemetry.

    Attributes:
        service_name (str): The service name reported on every span.
            Can be set via OTEL_SERVICE_NAME environment variable. Defaults to "gcstorage".
        otlp_endpoint (str | None): The OTLP gRPC collector spans are exported to.
            Can be set via OTEL_EXPORTER_OTLP_ENDPOINT environment variable.
            Defaults to None, in which case nothing is exported over OTLP.
        console_spans (bool): Whether finished spans are printed to stdout. Defaults to False.
        log_level (str): The level of the ``gcstorage`` loggers.
            Can be set via GCSTORAGE_LOG_LEVEL environment variable. Defaults to "INFO".
        httpx_log_level (str): The level of the httpx and httpcore loggers, which log every
            request at INFO. Defaults to "WARNING".

    """

    model_config = SettingsConfigDict(populate_by_name=True)

    service_name: str = Field(
        default="gcstorage",
        validation_alias=AliasChoices("service_name", "OTEL_SERVICE_NAME"),
        description="The service name reported on every span.",
    )
    otlp_endpoint: str | None = Field(
        default=None,
        validation_alias=AliasChoices("otlp_endpoint", "OTEL_EXPORTER_OTLP_ENDPOINT"),
        description="The OTLP gRPC collector spans are exported to.",
    )
    console_spans: bool = Field(default=False, description="Whether finished spans are printed to stdout.")
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("log_level", "GCSTORAGE_LOG_LEVEL"),
        description="The level of the gcstorage loggers.",
    )
    httpx_log_level: str = Field(default="WARNING", description="The level of the httpx and httpcore loggers.")
