"""
Metrics Collection
Prometheus metrics for pipeline performance tracking
"""

import time

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the UI pipeline.
    """

    def __init__(self, registry: CollectorRegistry = REGISTRY) -> None:
        self.registry = registry

        # Pipeline metrics
        self.pipeline_requests_total = Counter(
            "uiforge_pipeline_requests_total",
            "Total number of pipeline requests",
            ["operation", "status"],
            registry=registry,
        )
        self.pipeline_duration = Histogram(
            "uiforge_pipeline_duration_seconds",
            "Pipeline request duration in seconds",
            ["operation"],
            buckets=[0.01, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=registry,
        )

        # Oracle metrics
        self.oracle_calls_total = Counter(
            "uiforge_oracle_calls_total",
            "Total number of oracle calls",
            ["purpose", "status"],
            registry=registry,
        )
        self.oracle_duration = Histogram(
            "uiforge_oracle_duration_seconds",
            "Oracle call duration in seconds",
            ["purpose"],
            buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
            registry=registry,
        )
        self.plan_retries_total = Counter(
            "uiforge_plan_retries_total",
            "Corrective planner retries",
            ["reason"],
            registry=registry,
        )

        # Render and version metrics
        self.renders_total = Counter(
            "uiforge_renders_total",
            "Render engine outcomes",
            ["outcome"],
            registry=registry,
        )
        self.rollbacks_total = Counter(
            "uiforge_rollbacks_total",
            "Successful rollbacks",
            registry=registry,
        )

        # Error metrics
        self.errors_total = Counter(
            "uiforge_errors_total",
            "Total number of errors",
            ["error_type", "component"],
            registry=registry,
        )

        # System metrics
        self.uptime = Gauge(
            "uiforge_uptime_seconds",
            "Service uptime in seconds",
            registry=registry,
        )
        self.start_time = time.time()

    def record_request(self, operation: str, status: str, duration: float) -> None:
        """Record a pipeline request."""
        self.pipeline_requests_total.labels(operation=operation, status=status).inc()
        self.pipeline_duration.labels(operation=operation).observe(duration)

    def record_oracle_call(self, purpose: str, status: str, duration: float) -> None:
        """Record an oracle call (purpose: plan, retry, explain)."""
        self.oracle_calls_total.labels(purpose=purpose, status=status).inc()
        self.oracle_duration.labels(purpose=purpose).observe(duration)

    def record_plan_retry(self, reason: str) -> None:
        self.plan_retries_total.labels(reason=reason).inc()

    def record_render(self, outcome: str) -> None:
        """Record a render outcome (ok, empty, or the RenderError kind)."""
        self.renders_total.labels(outcome=outcome).inc()

    def record_rollback(self) -> None:
        self.rollbacks_total.inc()

    def record_error(self, error_type: str, component: str) -> None:
        """Record an error."""
        self.errors_total.labels(error_type=error_type, component=component).inc()

    def update_uptime(self) -> None:
        """Update the uptime metric."""
        self.uptime.set(time.time() - self.start_time)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        self.update_uptime()
        return generate_latest(self.registry)


# Global metrics collector instance
metrics_collector = MetricsCollector()
