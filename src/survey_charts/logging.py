from __future__ import annotations

import logging
import os


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_LEVEL_ENV = "SURVEY_CHARTS_LOG_LEVEL"


def configure_logging(level: str | None = None) -> None:
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, "INFO")
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
