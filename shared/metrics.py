"""
Shared metrics configuration for the HollyMarket Access Gateway.
"""

from typing import Dict, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, Info, generate_latest

# name -> (type, help, labels)
METRIC_DEFINITIONS = {
    "http_requests_total": (Counter, "HTTP requests served", ("method", "endpoint", "status_code")),
    "http_request_duration_seconds": (Histogram, "HTTP request latency", ("method", "endpoint")),
    "upstream_requests_total": (Counter, "Calls made to upstream APIs", ("upstream", "outcome")),
    "upstream_request_duration_seconds": (Histogram, "Upstream API call latency", ("upstream",)),
    "auth_failures_total": (Counter, "Rejected bearer tokens", ("mode",)),
}


class MetricsCollector:
    """Prometheus metrics for one service.

    Each collector owns its registry so several app instances (tests,
    workers) can coexist in one process without duplicate registrations.
    """

    def __init__(self, service_name: str, registry: Optional[CollectorRegistry] = None, version: str = "1.0.0"):
        self.service_name = service_name
        self.registry = registry if registry is not None else CollectorRegistry()

        build_info = Info("service", "Service build information", registry=self.registry)
        build_info.info({"service": service_name, "version": version})

        self._metrics = {
            name: metric_type(name, description, labels, registry=self.registry)
            for name, (metric_type, description, labels) in METRIC_DEFINITIONS.items()
        }

    def get_metric(self, name: str):
        return self._metrics.get(name)

    def record_http_request(self, method: str, endpoint: str, status_code: int, duration: float):
        """Count one served request against its route template."""
        self._metrics["http_requests_total"].labels(method, endpoint, str(status_code)).inc()
        self._metrics["http_request_duration_seconds"].labels(method, endpoint).observe(duration)

    def record_upstream_call(self, upstream: str, outcome: str, duration: float):
        """Record one upstream call; outcome is an HTTP status or error kind."""
        self._metrics["upstream_requests_total"].labels(upstream, outcome).inc()
        self._metrics["upstream_request_duration_seconds"].labels(upstream).observe(duration)

    def record_auth_failure(self, mode: str):
        self._metrics["auth_failures_total"].labels(mode).inc()

    def sample_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> Optional[float]:
        """Read a sample back from the registry."""
        return self.registry.get_sample_value(name, labels or {})

    def export(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)


def get_metrics_collector(service_name: str, registry: Optional[CollectorRegistry] = None) -> MetricsCollector:
    """Get a metrics collector for a service."""
    return MetricsCollector(service_name, registry)
