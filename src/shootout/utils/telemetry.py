"""Observability for the coordinator and agents.

Logging goes through structlog on top of the stdlib ``logging`` module,
round progress is exported as Prometheus metrics, and coordinator operations
are wrapped in OpenTelemetry spans.
"""

import logging
import sys
import time
from typing import Any, Literal

import structlog
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from prometheus_client import Counter, Gauge, Histogram, start_http_server

# Prometheus metrics
OPERATION_COUNTER = Counter(
    "shootout_operations_total",
    "Total number of coordinator operations",
    ["operation", "status"],
)

OPERATION_LATENCY = Histogram(
    "shootout_operation_duration_seconds",
    "Coordinator operation latency in seconds",
    ["operation"],
    buckets=[0.0001, 0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

REGISTRATIONS = Counter(
    "shootout_registrations_total",
    "Identities issued to connecting agents",
)

SHOTS_COMMITTED = Counter(
    "shootout_shots_committed_total",
    "Shot reports applied to the roster",
    ["outcome"],
)

ROUNDS_COMPLETED = Counter(
    "shootout_rounds_completed_total",
    "Rounds that ended with a declared winner",
)

ALIVE_PARTICIPANTS = Gauge(
    "shootout_alive_participants",
    "Participants currently alive in the round",
)

ROUND_ACTIVE = Gauge(
    "shootout_round_active",
    "1 while a round is active, 0 otherwise",
)


_SHARED_PROCESSORS: list[Any] = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]

_LOG_METHOD_BY_STATUS = {"error": "error", "warning": "warning"}


def setup_logging(
    log_level: str = "INFO", log_format: Literal["json", "text"] = "json"
) -> None:
    """Route structlog through stdlib logging on stderr.

    Args:
        log_level: Minimum level name, case-insensitive
        log_format: ``json`` for one JSON object per line, ``text`` for a
            human-readable console layout
    """
    level = logging.getLevelName(log_level.upper())
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level if isinstance(level, int) else logging.INFO,
    )

    renderer: Any
    if log_format == "text":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[*_SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def setup_tracing(
    service_name: str = "shootout", otlp_endpoint: str | None = None
) -> TracerProvider:
    """Install a global tracer provider.

    Spans go to the OTLP collector at ``otlp_endpoint``, or to stdout when no
    endpoint is given.
    """
    from shootout import __version__

    provider = TracerProvider(
        resource=Resource.create(
            {SERVICE_NAME: service_name, SERVICE_VERSION: __version__}
        )
    )
    exporter = (
        OTLPSpanExporter(endpoint=otlp_endpoint)
        if otlp_endpoint
        else ConsoleSpanExporter()
    )
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)
    return provider


def instrument_app(app: Any) -> None:
    """Trace every request handled by a FastAPI application."""
    FastAPIInstrumentor.instrument_app(app)


def get_tracer(name: str) -> trace.Tracer:
    return trace.get_tracer(name)


def get_logger(name: str, **context: Any) -> Any:
    """Return a structlog logger, bound to ``context`` when given."""
    logger = structlog.get_logger(name)
    return logger.bind(**context) if context else logger


def log_operation(
    logger: Any,
    operation: str,
    status: str = "success",
    latency_ms: float | None = None,
    **context: Any,
) -> None:
    """Write one record for a finished operation.

    Successes are logged at debug level; ``error`` and ``warning`` statuses
    keep their own level. Context entries whose value is ``None`` are dropped.
    """
    fields = {key: value for key, value in context.items() if value is not None}
    if latency_ms is not None:
        fields["latency_ms"] = round(latency_ms, 3)

    log = getattr(logger, _LOG_METHOD_BY_STATUS.get(status, "debug"))
    log("Operation completed", operation=operation, status=status, **fields)


class PerformanceTimer:
    """Times one coordinator operation.

    On exit the operation counter and latency histogram are updated, the span
    is closed with the outcome, and one ``log_operation`` record is written.
    Exceptions raised inside the block propagate unchanged.

    Example:
        with PerformanceTimer("commit_shot", participant="Bill", round_number=2):
            ...
    """

    def __init__(
        self,
        operation: str,
        logger: Any = None,
        record_metrics: bool = True,
        create_span: bool = True,
        **attributes: Any,
    ):
        self.operation = operation
        self.attributes = attributes
        self.logger = logger or get_logger("shootout.performance")
        self.record_metrics = record_metrics
        self.duration: float | None = None
        self._tracer = get_tracer("shootout.performance") if create_span else None
        self._span: trace.Span | None = None
        self._started = 0.0

    def __enter__(self) -> "PerformanceTimer":
        if self._tracer is not None:
            self._span = self._tracer.start_span(
                self.operation,
                attributes={k: v for k, v in self.attributes.items() if v is not None},
            )
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.duration = time.perf_counter() - self._started
        status = "success" if exc_val is None else "error"

        if self.record_metrics:
            OPERATION_COUNTER.labels(operation=self.operation, status=status).inc()
            OPERATION_LATENCY.labels(operation=self.operation).observe(self.duration)

        if self._span is not None:
            if exc_val is None:
                self._span.set_status(trace.Status(trace.StatusCode.OK))
            else:
                self._span.record_exception(exc_val)
                self._span.set_status(
                    trace.Status(trace.StatusCode.ERROR, str(exc_val))
                )
            self._span.end()

        failure = {"error": str(exc_val)} if exc_val is not None else {}
        log_operation(
            self.logger,
            self.operation,
            status,
            latency_ms=self.duration * 1000,
            **self.attributes,
            **failure,
        )


def record_registration() -> None:
    """Count an issued identity."""
    REGISTRATIONS.inc()


def record_shot(outcome: str) -> None:
    """Count a committed shot.

    Args:
        outcome: ``hit``, ``kill`` or ``winning_kill``
    """
    SHOTS_COMMITTED.labels(outcome=outcome).inc()


def record_round_completed() -> None:
    """Count a round that ended with a winner."""
    ROUNDS_COMPLETED.inc()


def update_alive_count(count: int) -> None:
    """Set the alive participants gauge."""
    ALIVE_PARTICIPANTS.set(count)


def update_round_active(active: bool) -> None:
    """Set the round activity gauge."""
    ROUND_ACTIVE.set(1 if active else 0)


def start_metrics_server(port: int = 9100) -> None:
    """Start Prometheus metrics HTTP server.

    Args:
        port: Port to serve metrics on
    """
    start_http_server(port)
