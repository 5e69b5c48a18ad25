"""
Shared metrics configuration for the authorization engine.
"""

from typing import Dict, Any, Optional
from prometheus_client import Counter, Histogram, Info, CollectorRegistry


class MetricsCollector:
    """Centralized metrics collector for the engine and its host service."""

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up common metrics."""

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

        self._setup_authorization_metrics()

    def _setup_authorization_metrics(self):
        """Set up authorization-specific metrics."""
        self._metrics["authorization_decisions_total"] = Counter(
            "authorization_decisions_total",
            "Total authorization decisions",
            ["decision"],
            registry=self.registry
        )

        self._metrics["authorization_denials_total"] = Counter(
            "authorization_denials_total",
            "Total enforced denials by outcome",
            ["outcome"],
            registry=self.registry
        )

        self._metrics["entity_loads_total"] = Counter(
            "entity_loads_total",
            "Total entity loads by result",
            ["result"],
            registry=self.registry
        )

        self._metrics["authorization_check_duration_seconds"] = Histogram(
            "authorization_check_duration_seconds",
            "Authorization check duration in seconds",
            registry=self.registry
        )

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

    def record_decision(self, allowed: bool, duration: float):
        """Record an authorization decision."""
        self._metrics["authorization_decisions_total"].labels(
            decision="allow" if allowed else "deny"
        ).inc()
        self._metrics["authorization_check_duration_seconds"].observe(duration)

    def record_denial(self, outcome: str):
        """Record how a denial was surfaced (forbidden, redirect, raised)."""
        self._metrics["authorization_denials_total"].labels(outcome=outcome).inc()

    def record_entity_load(self, result: str):
        """Record an entity load (hit, miss, skipped)."""
        self._metrics["entity_loads_total"].labels(result=result).inc()


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
