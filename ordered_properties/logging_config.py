import logging
import sys

import structlog

from ordered_properties.settings import settings


def configure_logging(level: str | None = None) -> None:
  """Configure structlog for normal application logging.

  Args:
      level: Minimum level name to emit. Defaults to ``settings.log_level``.
  """
  level_name = (level or settings.log_level).upper()
  structlog.configure(
    processors=[
      structlog.processors.TimeStamper(fmt="iso"),
      structlog.processors.add_log_level,
      structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
      logging.getLevelName(level_name)
    ),
    context_class=dict,
    # stdout carries command output, so logs go to stderr
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
  )
