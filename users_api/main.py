from __future__ import annotations

import json
import sys
from typing import Optional

import psycopg
import typer
import uvicorn
from fastapi import FastAPI

from users_api.api.app import create_app
from users_api.config import Settings, get_settings
from users_api.infrastructure.db_factory import Database, wait_for_database
from users_api.infrastructure.repository import UserRepository
from users_api.ingest.importer import Importer
from users_api.reporter import print_distribution, print_import_result
from users_api.service.queries import QueryService
from users_api.utils.logging import configure_logging, get_logger

app = typer.Typer(help="Users API: import the users flat file and serve it over HTTP.")
log = get_logger(__name__)


def _setup(settings: Settings) -> Database:
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    return Database.from_settings(settings)


def _connect_or_exit(database: Database, settings: Settings) -> None:
    try:
        wait_for_database(database, attempts=settings.db_connect_attempts)
    except psycopg.Error as exc:
        log.error("Database connection failed", extra={"error": str(exc)})
        database.close()
        raise typer.Exit(code=1) from exc


def build_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    run_import: bool = True,
) -> FastAPI:
    """
    Wire settings, database, importer and query service into a FastAPI app.

    Usable as an ASGI factory: `uvicorn users_api.main:build_app --factory`.
    """
    settings = settings or get_settings()
    database = database or Database.from_settings(settings)
    repository = UserRepository(database)
    importer = (
        Importer(repository, settings.users_csv_path, atomic=settings.import_atomic)
        if run_import
        else None
    )
    return create_app(
        QueryService(repository),
        importer=importer,
        static_dir=settings.static_dir,
        on_shutdown=database.close,
    )


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}:***@{settings.db_host}:{settings.db_port}/{settings.db_name} | "
        f"listen={settings.host}:{settings.port} csv={settings.users_csv_path} "
        f"atomic_import={settings.import_atomic} env={settings.app_env}"
    )


@app.command("import")
def import_users(
    json_output: bool = typer.Option(False, "--json", help="Print the result as JSON."),
) -> None:
    """
    Run the import once (no-op when the table already has rows).
    """
    settings = get_settings()
    database = _setup(settings)
    _connect_or_exit(database, settings)
    try:
        importer = Importer(
            UserRepository(database), settings.users_csv_path, atomic=settings.import_atomic
        )
        result = importer.run()
    finally:
        database.close()

    if json_output:
        typer.echo(json.dumps(result, indent=2))
    else:
        print_import_result(result)
    if result.get("status") == "failed":
        raise typer.Exit(code=1)


@app.command()
def distribution() -> None:
    """
    Print the current age distribution.
    """
    settings = get_settings()
    database = _setup(settings)
    _connect_or_exit(database, settings)
    try:
        print_distribution(QueryService(UserRepository(database)).age_distribution())
    finally:
        database.close()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Override HOST."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Override PORT."),
    skip_import: bool = typer.Option(False, "--skip-import", help="Do not import on startup."),
) -> None:
    """
    Import the flat file (if the table is empty) and serve the HTTP API.
    """
    settings = get_settings()
    database = _setup(settings)
    _connect_or_exit(database, settings)

    api = build_app(settings, database, run_import=not skip_import)
    listen_port = port or settings.port
    log.info(f"Server running on PORT: {listen_port}")
    uvicorn.run(api, host=host or settings.host, port=listen_port, log_config=None)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
