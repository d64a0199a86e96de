import logging

from flask import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from pythonjsonlogger import jsonlogger

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s %(message)s'

# HTTP
HTTP_REQUESTS = Counter('http_requests_total', 'HTTP requests', ['method', 'endpoint', 'status'])
HTTP_LATENCY = Histogram('http_request_duration_seconds', 'HTTP request latency', ['endpoint'])

# Flash sale lifecycle
BANNER_GENERATIONS = Counter('flash_sale_banner_generations_total', 'Banner regenerations', ['outcome'])
BANNER_LATENCY = Histogram('flash_sale_banner_generation_seconds', 'Banner regeneration latency')
EXPIRED_REMOVED = Counter('flash_sale_expired_removed_total', 'Expired flash sales deleted by cleanup')
SWEEP_RUNS = Counter('flash_sale_sweeps_total', 'Sweeper ticks', ['outcome'])
RATE_LIMITED = Counter('flash_sale_rate_limited_total', 'Requests rejected by the rate limiter')


class _JsonHandler(logging.StreamHandler):
    """Marker type so repeated create_app() calls reuse one handler"""


def configure_logging(level=logging.INFO):
    """Send every log record to stderr as one JSON object per line."""
    root = logging.getLogger()
    if not any(isinstance(h, _JsonHandler) for h in root.handlers):
        handler = _JsonHandler()
        handler.setFormatter(jsonlogger.JsonFormatter(LOG_FORMAT))
        root.addHandler(handler)
    root.setLevel(level)


def metrics_endpoint():
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
