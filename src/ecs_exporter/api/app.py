# src/ecs_exporter/api/app.py
"""
FastAPI application factory for the exporter.

Uses the factory pattern so the app can be created either with an injected
scraper (tests) or with a lifespan handler that opens the shared ECS client
and builds the scraper from the configured clusters.
"""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import FastAPI

from .. import __version__
from ..core.config import config, normalize_log_level, parse_listen_address, validate_settings
from ..core.ecs_client import open_ecs_client
from ..core.scraper import BaseScraper, build_scraper
from .routers import metrics, status

logger = logging.getLogger(__name__)


def _ecs_lifespan(cluster_names: List[str], region: Optional[str], profile: Optional[str], role: Optional[str]):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open one ECS client for the whole process and close it on shutdown."""
        logger.info("Starting AWS ECS exporter for cluster(s): %s", ", ".join(cluster_names))
        async with open_ecs_client(region=region, profile=profile, role=role) as ecs_client:
            app.state.scraper = build_scraper(ecs_client, cluster_names)
            yield
            logger.info("Shutting down AWS ECS exporter...")
            app.state.scraper = None

    return lifespan


def create_app(
    scraper: Optional[BaseScraper] = None,
    cluster_names: Optional[List[str]] = None,
    region: Optional[str] = None,
    profile: Optional[str] = None,
    role: Optional[str] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        scraper: A ready scraper. When given, no ECS client is opened.
        cluster_names: Clusters to scrape when no scraper is given.
        region: AWS region of the ECS client.
        profile: AWS profile of the ECS client.
        role: IAM role ARN the ECS client assumes, if any.

    Returns:
        A configured FastAPI application instance.
    """
    lifespan = None
    if scraper is None:
        lifespan = _ecs_lifespan(cluster_names or config.CLUSTER_NAMES, region, profile, role)

    app = FastAPI(
        title="AWS ECS Exporter",
        description="Prometheus exporter for AWS ECS services and container instances.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.scraper = scraper

    app.include_router(status.router, tags=["Status"])
    app.include_router(metrics.router, tags=["Metrics"])

    return app


def run(
    cluster_names: List[str],
    listen_address: str,
    region: Optional[str] = None,
    profile: Optional[str] = None,
    role: Optional[str] = None,
    tls_key_file: Optional[str] = None,
    tls_cert_file: Optional[str] = None,
    log_level: Optional[str] = None,
) -> None:
    """Validate the settings and serve the exporter until interrupted.

    Raises:
        ConfigurationError: If the settings are invalid.
    """
    log_level = log_level or config.LOG_LEVEL
    validate_settings(cluster_names, listen_address, tls_key_file, tls_cert_file, role=role, log_level=log_level)
    host, port = parse_listen_address(listen_address)

    app = create_app(cluster_names=cluster_names, region=region, profile=profile, role=role)
    logger.info("Listening on %s://%s", "https" if tls_key_file else "http", listen_address)
    uvicorn.run(
        app,
        host=host,
        port=port,
        ssl_keyfile=tls_key_file,
        ssl_certfile=tls_cert_file,
        log_level=normalize_log_level(log_level).lower(),
    )
