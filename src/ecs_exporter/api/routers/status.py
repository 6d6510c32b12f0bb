# src/ecs_exporter/api/routers/status.py
"""
Home page and liveness endpoint.
"""

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from ... import __version__

router = APIRouter()

HOME_PAGE = f"""<html>
<head><title>AWS ECS Exporter</title></head>
<body>
    AWS ECS Exporter v{__version__}
    <ul>
        <li><a href="/status">Exporter status</a></li>
        <li><a href="/metrics">Metrics</a></li>
    </ul>
</body>
</html>
"""

STATUS_PAGE = "<html><head><title>AWS ECS Exporter</title></head><body>Ok</body></html>"


@router.get("/", response_class=HTMLResponse)
async def home():
    return HOME_PAGE


@router.get("/status", response_class=HTMLResponse)
async def status():
    """Liveness check; does not touch the AWS API."""
    return STATUS_PAGE
