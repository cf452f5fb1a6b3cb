import logging

from prometheus_client import Counter, Histogram, Info, generate_latest
from prometheus_client.core import CollectorRegistry

logger = logging.getLogger(__name__)

# Prometheus Registry
REGISTRY = CollectorRegistry()

query_requests_total = Counter(
    'traindb_query_requests_total',
    'Total train car queries',
    ['status', 'service', 'method'],
    registry=REGISTRY
)

query_duration_seconds = Histogram(
    'traindb_query_duration_seconds',
    'Train car query duration in seconds',
    ['service', 'method'],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.0, 5.0],
    registry=REGISTRY
)

origin_rejections_total = Counter(
    'traindb_origin_rejections_total',
    'Requests rejected by the same-origin check',
    registry=REGISTRY
)

system_info = Info(
    'traindb_info',
    'System information',
    registry=REGISTRY
)


class PrometheusMetricsCollector:
    """Records query metrics into the process-local Prometheus registry"""

    def __init__(self):
        system_info.info({
            'version': '1.0.0',
            'service': 'traindb'
        })

    def record_query(
        self,
        service_name: str,
        method_name: str,
        duration_seconds: float,
        success: bool
    ):
        status = 'success' if success else 'error'

        query_requests_total.labels(
            status=status,
            service=service_name,
            method=method_name
        ).inc()

        query_duration_seconds.labels(
            service=service_name,
            method=method_name
        ).observe(duration_seconds)

    def record_origin_rejection(self):
        origin_rejections_total.inc()

    def get_prometheus_metrics(self) -> bytes:
        """Get Prometheus metrics in text format"""
        return generate_latest(REGISTRY)


# Global instance
prometheus_collector = PrometheusMetricsCollector()
