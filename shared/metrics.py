"""
Shared metrics configuration for the registry submission service.
"""

from prometheus_client import Counter, Histogram, Gauge, Info, CollectorRegistry, generate_latest
from typing import Dict, Any, Optional


class MetricsCollector:
    """Centralized metrics collector for services."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics for the service."""

        # Service info
        self._metrics["service_info"] = Info(
            "service_info",
            "Service information",
            registry=self.registry
        )
        self._metrics["service_info"].info({
            "service": self.service_name,
            "version": "1.0.0"
        })

        # HTTP metrics
        self._metrics["http_requests_total"] = Counter(
            "http_requests_total",
            "Total HTTP requests",
            ["method", "endpoint", "status_code"],
            registry=self.registry
        )

        self._metrics["http_request_duration_seconds"] = Histogram(
            "http_request_duration_seconds",
            "HTTP request duration in seconds",
            ["method", "endpoint"],
            registry=self.registry
        )

        # Health check metrics
        self._metrics["health_check_total"] = Counter(
            "health_check_total",
            "Total health check requests",
            ["status"],
            registry=self.registry
        )

        # Error metrics
        self._metrics["errors_total"] = Counter(
            "errors_total",
            "Total errors",
            ["error_type", "service"],
            registry=self.registry
        )

        self._setup_submission_metrics()

    def _setup_submission_metrics(self):
        """Set up submission pipeline metrics."""
        self._metrics["submissions_total"] = Counter(
            "submissions_total",
            "Total document submissions by outcome",
            ["document_format", "outcome"],
            registry=self.registry
        )

        self._metrics["submission_duration_seconds"] = Histogram(
            "submission_duration_seconds",
            "Document submission duration in seconds, gate wait included",
            ["document_format"],
            registry=self.registry
        )

        self._metrics["gate_wait_seconds"] = Histogram(
            "gate_wait_seconds",
            "Time spent waiting for a rate gate permit",
            registry=self.registry
        )

        self._metrics["gate_available_permits"] = Gauge(
            "gate_available_permits",
            "Rate gate permits currently available",
            registry=self.registry
        )

    def get_metric(self, name: str):
        """Get a metric by name."""
        return self._metrics.get(name)

    def export(self) -> bytes:
        """Render the registry in Prometheus text format."""
        return generate_latest(self.registry)

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Record HTTP request metrics."""
        self._metrics["http_requests_total"].labels(
            method=method,
            endpoint=endpoint,
            status_code=str(status_code)
        ).inc()

        self._metrics["http_request_duration_seconds"].labels(
            method=method,
            endpoint=endpoint
        ).observe(duration)

    def record_health_check(self, status: str):
        """Record health check metrics."""
        self._metrics["health_check_total"].labels(status=status).inc()

    def record_error(self, error_type: str, service: Optional[str] = None):
        """Record error metrics."""
        service_name = service or self.service_name
        self._metrics["errors_total"].labels(error_type=error_type, service=service_name).inc()

    def record_submission(self, document_format: str, outcome: str, duration: float):
        """Record the outcome of one submission attempt."""
        self._metrics["submissions_total"].labels(
            document_format=document_format,
            outcome=outcome
        ).inc()
        self._metrics["submission_duration_seconds"].labels(
            document_format=document_format
        ).observe(duration)

    def record_gate_admission(self, wait_seconds: float, available: int):
        """Record a rate gate admission."""
        self._metrics["gate_wait_seconds"].observe(wait_seconds)
        self._metrics["gate_available_permits"].set(available)


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
