"""Command-line entry point: serve the task tracker with uvicorn."""

import argparse
import logging
from pathlib import Path

import uvicorn

from tasktracker.config import get_settings
from tasktracker.logging_setup import setup_logging
from tasktracker.main import create_app

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="tasktracker", description="Run the task tracker server.")
    parser.add_argument("--host", default=settings.host)
    parser.add_argument("--port", type=int, default=settings.port)
    parser.add_argument("--db", type=Path, default=settings.database_path, help="SQLite database file")
    args = parser.parse_args(argv)

    setup_logging(level=settings.log_level, log_dir=settings.log_dir)

    settings = settings.model_copy(update={"host": args.host, "port": args.port, "database_path": args.db})
    app = create_app(settings)

    logger.info("Server running on http://%s:%s", args.host, args.port)
    logger.info("API available at http://%s:%s/api/tasks", args.host, args.port)
    uvicorn.run(app, host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
