"""Logging set-up for applications embedding the group tree.

Call :func:`setup_logging` once at start-up. The ``logging`` section of
:class:`~group_tree.config.ConfigManager` is applied with ``dictConfig``; its
file handler is redirected to ``$GROUP_TREE_LOG_DIR/app.log``.

Debug switches:

- ``GROUP_TREE_DEBUG_EDITS=1`` turns on DEBUG for the editing service and
  controller loggers.
- ``GROUP_TREE_DEBUG_MODULES=a.b,c.d`` does the same for the listed loggers.
"""

from __future__ import annotations

import copy
import logging
import logging.config
import os
from typing import List

from group_tree.config import ConfigManager

__all__ = ["setup_logging"]

_EDIT_LOGGERS = (
    "group_tree.core.services.tree_editing_service",
    "group_tree.controllers.tree_controller",
)
_TRUTHY = {"1", "true", "yes", "on"}
_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging() -> None:
    log_dir = os.environ.get("GROUP_TREE_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)

    config = copy.deepcopy(ConfigManager().get_logging_config())
    if not config.get("version"):
        _apply_console_only("logging config has no version")
    else:
        file_handler = config.get("handlers", {}).get("file")
        if file_handler is not None:
            file_handler["filename"] = os.path.join(log_dir, "app.log")
        try:
            logging.config.dictConfig(config)
        except (ValueError, TypeError, AttributeError, ImportError) as exc:
            _apply_console_only(str(exc))

    for name in _debug_targets():
        _enable_debug(name)


def _apply_console_only(reason: str) -> None:
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"simple": {"format": _FORMAT}},
        "handlers": {
            "console": {"class": "logging.StreamHandler", "formatter": "simple", "level": "INFO"},
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    })
    logging.getLogger(__name__).error("Console-only logging (%s)", reason)


def _debug_targets() -> List[str]:
    targets: List[str] = []
    if os.environ.get("GROUP_TREE_DEBUG_EDITS", "").strip().lower() in _TRUTHY:
        targets.extend(_EDIT_LOGGERS)
    extra = os.environ.get("GROUP_TREE_DEBUG_MODULES", "")
    targets.extend(name.strip() for name in extra.split(",") if name.strip())
    return targets


def _enable_debug(name: str) -> None:
    target = logging.getLogger(name)
    target.setLevel(logging.DEBUG)
    if not any(h.level <= logging.DEBUG for h in target.handlers):
        handler = logging.StreamHandler()
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(_FORMAT))
        target.addHandler(handler)
    target.debug("DEBUG enabled for '%s'", name)
