#!/usr/bin/env python3
"""
Example: rotate every 10KB and keep compressed archives
"""

import logging
import os
import tempfile

from filerotate import RotateConfig, RotatingWriter, list_archives


def main():
    logging.basicConfig(level=logging.DEBUG)

    log_dir = os.path.join(tempfile.gettempdir(), "filerotate_example")
    config = RotateConfig(
        filename=os.path.join(log_dir, "rotate_size_10k.log"),
        rotate_size="10k",
        max_archives=5,
        compress=True,
    )

    with RotatingWriter(config) as writer:
        for _ in range(10000):
            writer.write(b"This is a test message.\n")
        writer.wait_for_retention()

        for archive in list_archives(writer.filename, writer.config.archive_time_format):
            print(f"{archive.timestamp.isoformat()}  {archive.size:>6}  {archive.name}")


if __name__ == "__main__":
    main()
