# src/ecs_exporter/api/dependencies.py
"""
FastAPI dependency injection functions.

The scraper lives on ``app.state``; route handlers receive it through
Depends() so tests can override it.
"""

from fastapi import HTTPException, Request

from ..core.scraper import BaseScraper


async def get_scraper(request: Request) -> BaseScraper:
    """Provides the scraper created at startup."""
    scraper = getattr(request.app.state, "scraper", None)
    if scraper is None:
        raise HTTPException(status_code=503, detail="Exporter is not ready")
    return scraper
