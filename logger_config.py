import logging
import os

from rich.logging import RichHandler

LOG_LEVEL = os.environ.get("SWEEP_LOG_LEVEL", "INFO").upper()

log = logging.getLogger("timelock-sweep")

if not log.handlers:
    log.addHandler(RichHandler(show_path=False, markup=False))
    log.setLevel(LOG_LEVEL)
