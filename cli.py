#!/usr/bin/env python3
"""
Notedoc Backend CLI.

Entry point for running and inspecting the notes backend.

Usage:
    python cli.py --help
    python cli.py --service server --reload --verbose
    python cli.py --service health --debug
    python cli.py --service config
    python cli.py --service migrate --migrate-action upgrade
"""

import asyncio
import subprocess
import sys
from pathlib import Path

import click
import structlog

PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from modules.backend.core.logging import get_logger, setup_logging


def validate_project_root() -> Path:
    """Validate that we're running from the project root."""
    if not (PROJECT_ROOT / ".project_root").exists():
        click.echo(
            click.style("Error: .project_root not found. Run from project root.", fg="red"),
            err=True,
        )
        sys.exit(1)
    return PROJECT_ROOT


@click.command()
@click.option(
    "--service", "-s",
    type=click.Choice(["server", "health", "config", "info", "migrate"]),
    default="info",
    help="Service or command to run.",
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Enable verbose output (INFO level logging).",
)
@click.option(
    "--debug", "-d",
    is_flag=True,
    help="Enable debug output (DEBUG level logging).",
)
@click.option("--host", default=None, help="Server host.")
@click.option("--port", default=None, type=int, help="Server port.")
@click.option("--reload", is_flag=True, help="Enable auto-reload (server only).")
@click.option(
    "--migrate-action",
    type=click.Choice(["upgrade", "downgrade", "current", "history"]),
    default="current",
    help="Migration action.",
)
@click.option(
    "--revision",
    default=None,
    help="Target revision (default: head for upgrade, -1 for downgrade).",
)
def main(
    service: str,
    verbose: bool,
    debug: bool,
    host: str | None,
    port: int | None,
    reload: bool,
    migrate_action: str,
    revision: str | None,
) -> None:
    """
    Notedoc Backend CLI.

    \b
    Examples:
        python cli.py --service server --reload --verbose
        python cli.py --service health
        python cli.py --service config
        python cli.py --service migrate --migrate-action upgrade
        python cli.py --service migrate --migrate-action downgrade --revision base
    """
    validate_project_root()

    if debug:
        log_level = "DEBUG"
    elif verbose:
        log_level = "INFO"
    else:
        log_level = "WARNING"

    setup_logging(level=log_level, format_type="console")
    structlog.contextvars.bind_contextvars(frontend="cli")

    logger = get_logger(__name__)
    logger.debug("CLI invoked", extra={"service": service, "log_level": log_level})

    if service == "server":
        run_server(logger, host, port, reload)
    elif service == "health":
        check_health(logger)
    elif service == "config":
        show_config(logger)
    elif service == "info":
        show_info(logger)
    elif service == "migrate":
        run_migrations(logger, migrate_action, revision)


def run_server(logger, host: str | None, port: int | None, reload: bool) -> None:
    """Start the FastAPI server under uvicorn."""
    from modules.backend.core.config import get_app_config

    try:
        server_config = get_app_config().application.server
    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(
            click.style("Error: Could not load config/settings/application.yaml.", fg="red"),
            err=True,
        )
        sys.exit(1)

    server_host = host or server_config.host
    server_port = port or server_config.port

    logger.info(
        "Starting server",
        extra={"host": server_host, "port": server_port, "reload": reload},
    )

    cmd = [
        sys.executable, "-m", "uvicorn",
        "modules.backend.main:app",
        "--host", server_host,
        "--port", str(server_port),
    ]
    if reload:
        cmd.append("--reload")

    click.echo(f"Starting server at http://{server_host}:{server_port}")
    click.echo("Press Ctrl+C to stop\n")

    try:
        subprocess.run(cmd, check=True)
    except KeyboardInterrupt:
        logger.info("Server stopped")
    except subprocess.CalledProcessError as e:
        logger.error("Server failed to start", extra={"exit_code": e.returncode})
        sys.exit(e.returncode)


def check_health(logger) -> None:
    """Check configuration, application wiring and database connectivity."""
    click.echo("Checking application health...\n")

    checks: list[tuple[str, bool, str | None]] = []

    try:
        from modules.backend.core.config import get_app_config, get_settings

        app_config = get_app_config()
        get_settings()
        checks.append(("Configuration", True, f"App: {app_config.application.name}"))
    except Exception as e:
        checks.append(("Configuration", False, str(e)))
        logger.error("Configuration failed", extra={"error": str(e)})

    try:
        from modules.backend.main import get_app

        app = get_app()
        checks.append(("FastAPI application", True, f"Title: {app.title}"))
    except Exception as e:
        checks.append(("FastAPI application", False, str(e)))
        logger.error("FastAPI app failed", extra={"error": str(e)})

    try:
        from modules.backend.api.health import check_database
        from modules.backend.core.database import dispose_engine

        async def _ping() -> dict:
            try:
                return await check_database()
            finally:
                await dispose_engine()

        result = asyncio.run(_ping())
        healthy = result["status"] == "healthy"
        detail = f"{result['latency_ms']}ms" if healthy else result.get("error")
        checks.append(("Database", healthy, detail))
    except Exception as e:
        checks.append(("Database", False, str(e)))
        logger.error("Database check failed", extra={"error": str(e)})

    click.echo("Health Check Results:")
    click.echo("-" * 50)

    all_passed = True
    for name, passed, detail in checks:
        status = click.style("✓ PASS", fg="green") if passed else click.style("✗ FAIL", fg="red")
        detail_str = f" ({detail})" if detail else ""
        click.echo(f"  {status}  {name}{detail_str}")
        all_passed = all_passed and passed

    click.echo("-" * 50)

    if all_passed:
        click.echo(click.style("\nAll checks passed!", fg="green"))
    else:
        click.echo(click.style("\nSome checks failed. See details above.", fg="yellow"))
        sys.exit(1)


def _echo_section(title: str, values: dict, indent: int = 2) -> None:
    if title:
        click.echo(f"\n{title}:")
        click.echo("-" * 40)
    for key, value in values.items():
        if isinstance(value, dict):
            click.echo(f"{' ' * indent}{key}:")
            _echo_section("", value, indent + 2)
        else:
            click.echo(f"{' ' * indent}{key}: {value}")


def show_config(logger) -> None:
    """Display loaded configuration. Secrets are never printed."""
    click.echo("Application Configuration:")

    try:
        from modules.backend.core.config import get_app_config

        app_config = get_app_config()
        _echo_section("Application Settings (from YAML)", app_config.application.model_dump())
        _echo_section("Database Settings (from YAML)", app_config.database.model_dump())
        _echo_section("Logging Settings (from YAML)", app_config.logging.model_dump())
        logger.info("Configuration displayed successfully")

    except Exception as e:
        logger.error("Failed to load configuration", extra={"error": str(e)})
        click.echo(click.style(f"Error loading configuration: {e}", fg="red"))
        sys.exit(1)


def run_migrations(logger, migrate_action: str, revision: str | None) -> None:
    """Run database migrations using Alembic."""
    alembic_ini = PROJECT_ROOT / "modules" / "backend" / "migrations" / "alembic.ini"

    if not alembic_ini.exists():
        click.echo(
            click.style("Error: modules/backend/migrations/alembic.ini not found.", fg="red"),
            err=True,
        )
        sys.exit(1)

    cmd = [sys.executable, "-m", "alembic", "-c", str(alembic_ini)]

    if migrate_action == "upgrade":
        target = revision or "head"
        cmd.extend(["upgrade", target])
        click.echo(f"Upgrading database to revision: {target}")
    elif migrate_action == "downgrade":
        target = revision or "-1"
        cmd.extend(["downgrade", target])
        click.echo(f"Downgrading database to revision: {target}")
    elif migrate_action == "current":
        cmd.append("current")
        click.echo("Showing current database revision...")
    elif migrate_action == "history":
        cmd.extend(["history", "--verbose"])
        click.echo("Showing migration history...")

    logger.info("Running migrations", extra={"action": migrate_action, "revision": revision})
    click.echo()

    try:
        result = subprocess.run(cmd, cwd=PROJECT_ROOT)
    except FileNotFoundError:
        logger.error("alembic not found. Install with: pip install alembic")
        sys.exit(1)

    if result.returncode != 0:
        logger.error("Migration failed", extra={"exit_code": result.returncode})
        sys.exit(result.returncode)
    logger.info("Migration completed successfully")


def show_info(logger) -> None:
    """Display application information."""
    try:
        from modules.backend.core.config import get_app_config

        app_settings = get_app_config().application
    except Exception as e:
        logger.error("Failed to load application configuration", extra={"error": str(e)})
        click.echo(
            click.style("Error: Could not load application.yaml configuration.", fg="red"),
            err=True,
        )
        sys.exit(1)

    click.echo(f"{app_settings.name} {app_settings.version}")
    click.echo("=" * 40)
    click.echo(app_settings.description)
    click.echo()
    click.echo("Services (--service):")
    click.echo("  server         FastAPI server (uvicorn)")
    click.echo("  health         Check configuration and database")
    click.echo("  config         Display configuration")
    click.echo("  migrate        Database migrations")
    click.echo("  info           Show this information")
    click.echo()
    click.echo("Options:")
    click.echo("  --verbose, -v  Enable INFO level logging")
    click.echo("  --debug, -d    Enable DEBUG level logging")

    logger.debug("Info displayed")


if __name__ == "__main__":
    main()
