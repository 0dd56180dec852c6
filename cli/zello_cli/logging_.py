from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")
    logging.getLogger("zello_client").setLevel(level)

    # httpx logs every request at INFO; keep it for -v only
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(level)
