"""Logging and tracing setup for applications using the storage client."""

import logging
import uuid
from typing import Self

import httpx
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.sdk.resources import SERVICE_INSTANCE_ID, SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from gcstorage.configs.observability import ObservabilityConfig

logger = logging.getLogger(__name__)

LIBRARY_LOGGER = "gcstorage"
NOISY_LOGGERS = ("httpx", "httpcore")
LOG_FORMAT = (
    "%(asctime)s %(levelname)s [%(name)s] [trace_id=%(otelTraceID)s span_id=%(otelSpanID)s] %(message)s"
)


class ObservabilitySetupper:
    """Wires the storage client into logging and OpenTelemetry.

    Every step is optional and returns the setupper, so the steps chain:

    ```
        setupper = ObservabilitySetupper().setup_logging().setup_tracing().instrument_httpx()
        ...
        setupper.shutdown()
    ```

    The storage client opens a span per request whether or not tracing is set up. Without
    `setup_tracing` the spans go to whatever tracer provider the application installed.
    """

    def __init__(self, config: ObservabilityConfig | None = None) -> None:
        """Initialize the setupper.

        Args:
            config: The observability config. If None, it is read from the environment.

        """
        self._config = config or ObservabilityConfig()
        self._resource = Resource.create(
            {SERVICE_NAME: self._config.service_name, SERVICE_INSTANCE_ID: str(uuid.uuid4())}
        )
        self._tracer_provider: TracerProvider | None = None
        self._log_handler: logging.Handler | None = None

    @property
    def resource(self) -> Resource:
        """The resource spans are reported with."""
        return self._resource

    @property
    def tracer_provider(self) -> TracerProvider | None:
        """The tracer provider installed by `setup_tracing`, if it ran."""
        return self._tracer_provider

    def setup_logging(self, formatter: logging.Formatter | None = None) -> Self:
        """Send the ``gcstorage`` logs to stderr with the ids of the current span.

        Only the library loggers are touched, the root logger is left to the application. The
        httpx loggers are turned down to `ObservabilityConfig.httpx_log_level`.

        Args:
            formatter: The formatter of the handler. Defaults to one using `LOG_FORMAT`.

        """
        LoggingInstrumentor().instrument(set_logging_format=False)

        library_logger = logging.getLogger(LIBRARY_LOGGER)
        library_logger.setLevel(self._config.log_level.upper())

        if self._log_handler is None:
            self._log_handler = logging.StreamHandler()
            library_logger.addHandler(self._log_handler)
            library_logger.propagate = False
        self._log_handler.setFormatter(formatter or logging.Formatter(LOG_FORMAT))

        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(self._config.httpx_log_level.upper())

        logger.info("Logging of %s set to %s", LIBRARY_LOGGER, self._config.log_level)
        return self

    def setup_tracing(self) -> Self:
        """Install a tracer provider exporting to the sinks enabled in the config."""
        tracer_provider = TracerProvider(resource=self._resource)

        if self._config.console_spans:
            tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
            logger.info("Exporting spans to the console")

        if self._config.otlp_endpoint:
            exporter = OTLPSpanExporter(endpoint=self._config.otlp_endpoint)
            tracer_provider.add_span_processor(BatchSpanProcessor(exporter))
            logger.info("Exporting spans to %s", self._config.otlp_endpoint)

        trace.set_tracer_provider(tracer_provider)
        self._tracer_provider = tracer_provider
        return self

    def instrument_httpx(self, client: httpx.AsyncClient | None = None) -> Self:
        """Trace the requests of `client`, or of every httpx client when None.

        The storage client spans then get a child span per HTTP exchange, token requests included.
        """
        if client is None:
            HTTPXClientInstrumentor().instrument(tracer_provider=self._tracer_provider)
        else:
            HTTPXClientInstrumentor.instrument_client(client, tracer_provider=self._tracer_provider)
        return self

    def shutdown(self) -> None:
        """Flush pending spans and detach the log handler."""
        if self._tracer_provider is not None:
            self._tracer_provider.shutdown()

        if self._log_handler is not None:
            library_logger = logging.getLogger(LIBRARY_LOGGER)
            library_logger.removeHandler(self._log_handler)
            library_logger.propagate = True
            self._log_handler = None
