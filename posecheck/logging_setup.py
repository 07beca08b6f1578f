from __future__ import annotations

import logging
import sys

from posecheck.models.config import LoggingConfig

_TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
_JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", '
    '"name": "%(name)s", "message": "%(message)s"}'
)


def setup_logging(cfg: LoggingConfig) -> None:
    """Configure root logging from the ``logging`` config section.

    Output goes to stdout, plus ``cfg.file`` when set. Calling again
    replaces the previous handlers.
    """
    level = getattr(logging, cfg.level, logging.INFO)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if cfg.file:
        handlers.append(logging.FileHandler(cfg.file))

    logging.basicConfig(
        level=level,
        format=_JSON_FORMAT if cfg.json_logs else _TEXT_FORMAT,
        handlers=handlers,
        force=True,
    )
    logging.getLogger("posecheck").setLevel(level)
    logging.getLogger(__name__).info(
        "Logging configured with level: %s, JSON: %s", cfg.level, cfg.json_logs
    )
