"""Process-wide logging setup."""
from __future__ import annotations

import logging
import os
from typing import List

from .config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Log to the console, and to ``settings.log_file`` when one is set."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if settings.log_file:
        log_dir = os.path.dirname(settings.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.FileHandler(settings.log_file))

    logging.basicConfig(
        level=settings.log_level.upper(),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    # boto3 is chatty at INFO
    logging.getLogger("botocore").setLevel(logging.WARNING)
