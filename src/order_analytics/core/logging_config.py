import logging
import sys

from .config import LOG_LEVEL, LOG_NAMESPACES


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True  # No namespaces configured, allow all records
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def configure_logging(level: str = LOG_LEVEL, namespaces: list[str] | None = None) -> logging.Logger:
    """Attach the console handler to the ``order_analytics`` parent logger.

    Modules log through ``logging.getLogger(__name__)`` and inherit from this
    logger. Calling it again replaces the handler instead of stacking a new one.
    """
    app_logger = logging.getLogger("order_analytics")
    app_logger.setLevel(level)

    for handler in list(app_logger.handlers):
        if getattr(handler, "_order_analytics_console", False):
            app_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(log_formatter)
    console_handler.addFilter(NamespaceFilter(namespaces if namespaces is not None else LOG_NAMESPACES))
    console_handler._order_analytics_console = True
    app_logger.addHandler(console_handler)

    # Per-namespace overrides, e.g. to see the query-level debug output:
    # logging.getLogger("order_analytics.features.analytics").setLevel(logging.DEBUG)
    return app_logger
