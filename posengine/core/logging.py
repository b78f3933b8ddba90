from __future__ import annotations

import logging

from posengine.core.config import get_settings

_HANDLER_NAME = "posengine"


def configure_logging(level: str | None = None) -> logging.Logger:
    settings = get_settings()
    root = logging.getLogger("posengine")
    root.setLevel((level or settings.log_level).upper())

    if not any(h.get_name() == _HANDLER_NAME for h in root.handlers):
        handler = logging.StreamHandler()
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(settings.log_format))
        root.addHandler(handler)
    return root
