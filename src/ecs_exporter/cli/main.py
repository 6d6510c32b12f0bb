# src/ecs_exporter/cli/main.py
"""
This module is the main entry point for the ecs-exporter CLI.
"""

import logging
from typing import List, Optional

import typer
from typing_extensions import Annotated

from ..core.config import config, normalize_log_level
from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


app = typer.Typer(
    name="ecs-exporter",
    help="Expose the state of AWS ECS clusters as Prometheus metrics.",
    add_completion=False,
)


def version_callback(value: bool):
    """
    Prints the version of the exporter.
    """
    if value:
        from .. import __version__

        typer.echo(f"ecs-exporter version: {__version__}")
        raise typer.Exit()


@app.command()
def version():
    """
    Show the version of the exporter.
    """
    from .. import __version__

    typer.echo(f"ecs-exporter version: {__version__}")


@app.command()
def serve(
    clusters: Annotated[
        Optional[List[str]],
        typer.Option("--cluster", help="Cluster name (repeat for several clusters)."),
    ] = None,
    region: Annotated[Optional[str], typer.Option("--region", help="AWS region to use, if any.")] = None,
    profile: Annotated[Optional[str], typer.Option("--profile", help="AWS profile to use, if any.")] = None,
    role: Annotated[Optional[str], typer.Option("--role", help="IAM role ARN to assume, if any.")] = None,
    listen: Annotated[Optional[str], typer.Option("--listen", "-l", help="HTTP listen address.")] = None,
    tls_key: Annotated[Optional[str], typer.Option("--tls-key", help="Path to the TLS private key.")] = None,
    tls_cert: Annotated[Optional[str], typer.Option("--tls-cert", help="Path to the TLS certificate.")] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Log level (CRITICAL, ERROR, WARNING, INFO or DEBUG)."),
    ] = None,
) -> None:
    """
    Serve the /metrics endpoint for the given clusters.
    """
    from ..api.app import run

    try:
        level = normalize_log_level(log_level or config.LOG_LEVEL)
        logging.basicConfig(
            level=level,
            format="%(asctime)s - %(levelname)s - %(message)s",
        )
        run(
            cluster_names=clusters or config.CLUSTER_NAMES,
            listen_address=listen or config.LISTEN_ADDRESS,
            region=region or config.AWS_REGION,
            profile=profile or config.AWS_PROFILE,
            role=role or config.ROLE,
            tls_key_file=tls_key or config.TLS_KEY_FILE,
            tls_cert_file=tls_cert or config.TLS_CERT_FILE,
            log_level=level,
        )
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
):
    """
    ecs-exporter CLI main entry point.
    """
    pass


if __name__ == "__main__":
    app()
