"""
Prometheus collectors shared by services and the /metrics endpoint.
"""
import os

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, REGISTRY
from prometheus_client import multiprocess

# Check if running in multi-process mode (Gunicorn)
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

# Use multiprocess registry in production with Gunicorn
if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
else:
    registry = REGISTRY

_collector_registry = registry if not MULTIPROCESS_MODE else None

# HTTP Request Metrics
http_requests_total = Counter(
    'http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'http_status'],
    registry=_collector_registry
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request latency in seconds',
    ['method', 'endpoint'],
    registry=_collector_registry,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0)
)

http_requests_in_flight = Gauge(
    'http_requests_in_flight',
    'Number of HTTP requests currently being processed',
    registry=_collector_registry
)

# Order placement
orders_placed_total = Counter(
    'orders_placed_total',
    'Orders placed successfully',
    registry=_collector_registry
)

order_placement_failures_total = Counter(
    'order_placement_failures_total',
    'Order placements rolled back',
    ['reason'],
    registry=_collector_registry
)

preorder_lines_total = Counter(
    'preorder_lines_total',
    'Order lines that could not be covered by on-hand stock',
    registry=_collector_registry
)

stock_conflict_retries_total = Counter(
    'stock_conflict_retries_total',
    'Line reconciliations retried after a concurrent stock change',
    registry=_collector_registry
)

procurement_arrivals_total = Counter(
    'procurement_arrivals_total',
    'Procurements marked ARRIVED (stock credited)',
    registry=_collector_registry
)
