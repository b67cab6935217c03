#!/usr/bin/env python3
"""
Example: route stdlib logging into a daily rotated file
"""

import logging
import os
import tempfile

from filerotate import RotateConfig, RotatePeriod, create_file_logger


def main():
    config = RotateConfig(
        filename=os.path.join(tempfile.gettempdir(), "filerotate_daily.log"),
        rotate_period=RotatePeriod.DAILY,
        rotate_size="100m",
        max_archive_days=30,
    )
    logger = create_file_logger("payments", config, level=logging.INFO)

    logger.info("rotate by daily and file size 100m")
    logger.warning("archives older than 30 days are removed")

    for handler in logger.handlers:
        handler.close()


if __name__ == "__main__":
    main()
