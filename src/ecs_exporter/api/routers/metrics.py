# src/ecs_exporter/api/routers/metrics.py
"""
The Prometheus metrics endpoint.

Each request runs one scrape. The response always has status 200: it holds
the process-wide default metrics followed by whatever the scrape produced.
"""

import logging

from fastapi import APIRouter, Depends, Response
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, Counter, generate_latest

from ...core.scraper import BaseScraper
from ..dependencies import get_scraper

logger = logging.getLogger(__name__)

router = APIRouter()

# Process-wide: registered once in the default registry at import, never reset.
HTTP_REQUESTS = Counter(
    "http_requests",
    "Number of HTTP requests received by the exporter",
    ["status"],
)


@router.get("/metrics")
async def metrics(scraper: BaseScraper = Depends(get_scraper)):
    """Scrape the configured clusters and return the text exposition."""
    try:
        registry = await scraper.scrape()
        status = "success"
    except Exception as e:
        logger.warning("Scrape failed: %s", e, exc_info=True)
        registry = CollectorRegistry()
        status = "error"
    HTTP_REQUESTS.labels(status=status).inc()

    payload = generate_latest(REGISTRY) + generate_latest(registry)
    return Response(content=payload, media_type=CONTENT_TYPE_LATEST)
