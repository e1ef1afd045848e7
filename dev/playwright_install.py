#!/usr/bin/env python3
"""
Install the Playwright browser the counter suite launches.
This script only depends on the installed playwright package and does not import counter_e2e.
"""

import logging
import os
import subprocess
import sys

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main() -> None:
    """Install Playwright browsers."""
    browser = os.environ.get("COUNTER_E2E_BROWSER") or "chromium"
    logger.info(f"Installing Playwright {browser}...")

    try:
        result = subprocess.run(
            [sys.executable, "-m", "playwright", "install", browser],
            check=True,
            capture_output=True,
            text=True
        )
        logger.info("Playwright browser installation completed successfully")
        logger.info(f"Output: {result.stdout}")

    except subprocess.CalledProcessError as e:
        logger.error(f"Failed to install Playwright {browser}: {e}")
        logger.error(f"Error output: {e.stderr}")
        sys.exit(1)


if __name__ == "__main__":
    main()
