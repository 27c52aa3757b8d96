#!/usr/bin/env python3
"""
Bookmark Guard - keeps a bookmark tree locked to a captured layout

Runs the guard service against the Chromium Bookmarks file named in
config.yaml. Protection is toggled through the command channel; while it is
on, every outside change to the file is reverted.
"""

import asyncio
import logging

from bookmark_guard.log import setup_logging
from bookmark_guard.service import GuardService


def main():
    """Start the guard service and poll until interrupted."""
    setup_logging()
    service = GuardService.from_config()
    try:
        asyncio.run(service.run())
    except KeyboardInterrupt:
        logging.info("Interrupted by user")


if __name__ == "__main__":
    main()
