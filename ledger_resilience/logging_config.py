"""
Logging setup for ledger-resilience.

Library modules log through stdlib loggers; `setup_logging` routes those
records through structlog so retry warnings come out as JSON lines (or
colored console lines while debugging).
"""

import logging
import sys
from typing import List, Optional

import structlog

from .config import settings

# Transport libraries whose DEBUG chatter drowns out retry lines
QUIET_LOGGERS = ("httpcore", "httpx", "asyncio")


def build_pre_chain(json_logs: bool) -> List[structlog.types.Processor]:
    """Processors applied to every record before rendering."""
    chain: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        chain.append(structlog.processors.format_exc_info)
    return chain


def build_renderer(json_logs: bool) -> structlog.types.Processor:
    if json_logs:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def setup_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """Install a single stdout handler on the root logger.

    Args:
        log_level: Override log level (default: from settings.log_level)
        json_logs: Override renderer choice (default: from settings.log_json).
            DEBUG level always renders to the console.
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if json_logs is None:
        json_logs = settings.log_json
    json_logs = json_logs and level != logging.DEBUG

    pre_chain = build_pre_chain(json_logs)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                build_renderer(json_logs),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
