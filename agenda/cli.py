"""
Agenda CLI Interface
Command line interface implemented using Typer
"""

import asyncio
import signal
from typing import Optional

import typer
import uvicorn

from agenda.config.loader import get_config, load_config
from agenda.core.logger import get_logger, setup_logging
from agenda.system.runtime import start_runtime, stop_runtime

logger = get_logger(__name__)


def start(
    host: Optional[str] = typer.Option(None, help="Server host address"),
    port: Optional[int] = typer.Option(None, help="Server port"),
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
    debug: bool = typer.Option(False, help="Enable debug mode"),
):
    """Start the Agenda API server"""
    try:
        # Load configuration
        load_config(config_file)
        setup_logging()
        config = get_config()
        host = host or config.get("server.host", "127.0.0.1")
        port = port or config.get("server.port", 8000)

        logger.info("Starting Agenda service...")
        logger.info(f"Host: {host}, Port: {port}")
        logger.info(f"Debug mode: {debug}")

        uvicorn.run(
            "agenda.app:app",
            host=host,
            port=port,
            reload=debug,
            log_level="debug" if debug else "info",
        )

    except Exception as e:
        logger.error(f"Failed to start service: {e}")
        raise typer.Exit(1)


def init_db(
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
    db_path: Optional[str] = typer.Option(None, help="Database file path"),
):
    """Create the database and seed default entities and settings"""
    from agenda.core.db import ENTITIES, DatabaseManager, get_db

    load_config(config_file)
    if db_path:
        config = get_config()
        db = DatabaseManager(db_path, config.get("app.default_language", "it"))
    else:
        db = get_db()

    if not db.available:
        logger.error(f"Database initialization failed: {db.last_error}")
        raise typer.Exit(1)

    entities = db.get_all(ENTITIES)
    typer.echo(f"Database ready: {db.db_path}")
    typer.echo(f"Entities: {len(entities)}, settings: {db.get_all_settings()}")


def run(
    config_file: Optional[str] = typer.Option(None, help="Configuration file path"),
):
    """Run the reminder loop in the terminal (no HTTP server)"""

    async def run_reminders():
        try:
            await start_runtime(config_file)
            logger.info("Reminder loop started, press Ctrl+C to stop")

            # Wait for stop signal
            stop_event = asyncio.Event()

            def signal_handler(sig, frame):
                logger.info("Stop signal received...")
                stop_event.set()

            signal.signal(signal.SIGINT, signal_handler)
            signal.signal(signal.SIGTERM, signal_handler)

            # Block and wait
            await stop_event.wait()

            await stop_runtime(quiet=True)
            logger.info("Reminder loop stopped")

        except Exception as e:
            logger.error(f"Run failed: {e}")
            raise typer.Exit(1)

    asyncio.run(run_reminders())


def main():
    """Main function"""
    app = typer.Typer()

    app.command()(start)  # Start FastAPI server
    app.command()(run)  # Run reminders in terminal mode
    app.command()(init_db)  # Initialize database

    app()


if __name__ == "__main__":
    main()
