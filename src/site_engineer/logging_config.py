from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(format=LOG_FORMAT, level=getattr(logging, str(level).upper(), logging.INFO))
    logging.getLogger("site_engineer").setLevel(getattr(logging, str(level).upper(), logging.INFO))
