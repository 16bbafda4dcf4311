from __future__ import annotations

"""Central logging configuration for fibertext.

Import and call :func:`setup_logging` at host start-up.
"""

import copy
import logging
import logging.config
import os
from typing import Any, Dict, Optional

from fibertext.config import ConfigManager

__all__ = ["setup_logging"]

_EDIT_LOGGERS = (
    "fibertext.core.services.edit_service",
    "fibertext.core.services.selection_service",
    "fibertext.core.models.document_tree",
)


def setup_logging(log_dir: Optional[str] = None) -> None:
    """Configure logging for the editor using configuration from YAML files."""
    log_dir = log_dir or os.environ.get("FIBERTEXT_LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "app.log")

    try:
        logging_config: Dict[str, Any] = copy.deepcopy(ConfigManager().get_logging_config())
        if logging_config.get("version"):
            handlers = logging_config.get("handlers") or {}
            if "file" in handlers:
                handlers["file"] = dict(handlers["file"], filename=log_file)
            logging.config.dictConfig(logging_config)
            logging.info("===== Logging initialised from config files =====")
        else:
            _setup_minimal_logging()
    except (ValueError, TypeError, AttributeError, ImportError, OSError) as exc:
        _setup_minimal_logging()
        logging.error("Error loading logging config: %s", exc)

    _apply_debug_overrides()


def _setup_minimal_logging() -> None:
    """Set up minimal console-only logging when config is unavailable."""
    minimal_config = {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'simple': {
                'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'simple',
                'level': 'INFO',
            },
        },
        'root': {
            'level': 'INFO',
            'handlers': ['console'],
        },
    }

    logging.config.dictConfig(minimal_config)
    logging.warning("===== Logging initialised with minimal fallback =====")


def _apply_debug_overrides() -> None:
    """Apply environment-driven module-specific debug overrides.

    Supports:
    - FIBERTEXT_DEBUG_EDITS=true  -> DEBUG for the edit, selection and tree loggers
    - FIBERTEXT_DEBUG_MODULES=comma,separated,logger,names -> DEBUG for listed loggers
    """
    debug_edits = os.environ.get('FIBERTEXT_DEBUG_EDITS', '').strip().lower() in {'1', 'true', 'yes', 'on'}
    extra_modules = os.environ.get('FIBERTEXT_DEBUG_MODULES', '').strip()
    targets = []
    if debug_edits:
        targets.extend(_EDIT_LOGGERS)
    if extra_modules:
        targets.extend([m.strip() for m in extra_modules.split(',') if m.strip()])
    for name in targets:
        logger = logging.getLogger(name)
        logger.setLevel(logging.DEBUG)
        # Ensure at least one handler emits DEBUG for this logger
        has_debug_handler = any(h.level <= logging.DEBUG for h in logger.handlers)
        if not has_debug_handler:
            handler = logging.StreamHandler()
            handler.setLevel(logging.DEBUG)
            handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
            logger.addHandler(handler)
        logger.info("Debug override active for logger '%s'", name)
