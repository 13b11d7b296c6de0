#!/usr/bin/env python3
"""
Meteor tracker driver: load the dashboard once and print it.

:copyright: (c) 2025 by Meir Miyara.
:license: MPL-2.0, see LICENSE for more details.
"""
import asyncio
import logging
import sys
from typing import Optional

from meteor_tracker.client import FetchError, NASAClient
from meteor_tracker.config import Config
from meteor_tracker.dashboard import load_dashboard, render_dashboard, render_error

_LOG = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)8s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging and quiet aiohttp."""
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


async def main(config_path: Optional[str] = None) -> int:
    """Main entry point. Returns the process exit code."""
    config = Config(config_path)
    setup_logging(config.log_level)
    _LOG.info("Starting meteor tracker")

    show_only_hazardous = config.show_only_hazardous
    sort_by = config.sort_by

    async with NASAClient.from_config(config) as client:
        try:
            data = await load_dashboard(client)
        except FetchError as ex:
            _LOG.error("Error fetching data: %s", ex)
            print(render_error(str(ex)))
            return 1

    print(render_dashboard(data, show_only_hazardous=show_only_hazardous, sort_by=sort_by))
    return 0


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        print("Meteor tracker stopped by user")
