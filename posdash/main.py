"""Entry point for the posdash Textual app."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from posdash.config import DB_PATH, LOG_LEVEL, LOG_PATH
from posdash.persistence import PersistedStore
from posdash.pos_app import PosApp


def configure_logging(log_path: str = LOG_PATH, level: str = LOG_LEVEL) -> None:
    # The terminal belongs to Textual, so log records go to a file.
    path = Path(log_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(path),
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Run the Textual application."""
    parser = argparse.ArgumentParser(description="posdash point-of-sale terminal")
    parser.add_argument("--db", default=DB_PATH, help="SQLite file holding terminal state")
    args = parser.parse_args()

    configure_logging()
    PosApp(PersistedStore(args.db)).run()


if __name__ == "__main__":
    main()
