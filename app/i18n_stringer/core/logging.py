"""i18n-stringer structured logging module.

Generation runs log through structlog on top of the standard library
``logging`` module: console output while developing (a PREFIX is set),
JSON lines otherwise. Output is silenced entirely under pytest.
"""

import logging
import inspect
import sys
from typing import List, Optional

import structlog
from structlog.stdlib import BoundLogger
from structlog.typing import Processor

from .config import settings

PACKAGE = "i18n_stringer"


def _is_test_environment() -> bool:
    """Detect if running in a test environment."""
    return "pytest" in sys.modules


def _processors(production: bool) -> List[Processor]:
    processors: List[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if production:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    return processors


def configure_logging(
    level: Optional[str] = None, production: Optional[bool] = None
) -> BoundLogger:
    """Configure structured logging for a generation run.

    Args:
        level: Log level name (default: settings LOG_LEVEL).
        production: Render JSON instead of console output
            (default: settings is_production).

    Returns:
        Root bound logger.
    """
    if _is_test_environment():
        logging.root.setLevel(logging.CRITICAL + 1)
        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )
        logging.basicConfig(
            format="%(message)s",
            level=logging.CRITICAL + 1,
            force=True,
        )
        return structlog.stdlib.get_logger()

    if production is None:
        production = settings.is_production
    level_name = (level or settings.LOG_LEVEL).upper()

    structlog.configure(
        processors=_processors(production),
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level_name, logging.INFO),
    )
    return structlog.stdlib.get_logger()


logger: BoundLogger = configure_logging()


def _component(module_name: str) -> str:
    """Component name of a module: its path inside the package, dotted."""
    prefix = PACKAGE + "."
    if module_name.startswith(prefix):
        return module_name[len(prefix):]
    return module_name.rsplit(".", 1)[-1]


def get_module_logger() -> BoundLogger:
    """Get a logger bound to the calling module.

    Binds ``component`` (e.g. ``catalog`` or ``core.config``) and
    ``module_path``.
    """
    current_frame = inspect.currentframe()
    if current_frame is None:
        return logger

    module = inspect.getmodule(current_frame.f_back)
    if module is None:
        return logger.bind(component="unknown")

    return logger.bind(
        component=_component(module.__name__),
        module_path=module.__name__,
    )
