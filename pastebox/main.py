"""
main.py

Entry point for the pastebox server.

Usage:
  pastebox --config /etc/pastebox/pastebox.toml

Notes:
  - Objects are stored flat under ``upload_path`` and removed once older
    than ``lifetime`` by a background sweeper
  - LOG_LEVEL controls verbosity (default INFO)
"""

import argparse
import atexit
import logging
import os
import sys
from typing import List, Optional

from pastebox.app_factory import SWEEPER_EXTENSION, create_app
from pastebox.config.settings import load_config, resolve_config_path
from pastebox.domain.errors import ConfigError


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pastebox", description="Ephemeral file paste server"
    )
    parser.add_argument("--config", help="Path to config")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging()

    try:
        config = load_config(resolve_config_path(args.config))
    except ConfigError as e:
        print(str(e))
        sys.exit(1)

    app = create_app(config, start_sweeper=True)
    atexit.register(app.extensions[SWEEPER_EXTENSION].stop, wait=False)

    print("Running on port", config.port)
    app.run(host=config.host, port=config.port)


if __name__ == "__main__":
    main()
