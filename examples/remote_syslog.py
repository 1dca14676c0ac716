"""Minimal example sending log lines to a remote collector over TCP."""

from __future__ import annotations

import logging
import time

import sysline


def main() -> None:
    sysline.configure(
        {
            "destination": {"address": "tcp://127.0.0.1:514"},
            "priority": {"facility": "local0", "severity": "info"},
            "identity": {"tag": "sysline-demo"},
            "handler": {"level": "INFO", "format": "%(name)s %(message)s"},
        }
    )
    logging.getLogger().setLevel(logging.INFO)

    logger = sysline.get_logger("examples.orders")
    try:
        for order_id in range(1, 4):
            logger.info("processed order %s", order_id)
            time.sleep(0.1)
    finally:
        sysline.shutdown()


if __name__ == "__main__":
    main()
