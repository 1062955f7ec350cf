"""
AWS Lambda entry point for scheduled runs
"""

import asyncio
import logging
import os
from typing import Any, Dict

from commutelog.config.loader import ConfigLoader
from commutelog.pipeline import run_pipeline

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Root level from LOG_LEVEL; Lambda installs the handler itself"""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    logging.getLogger().setLevel(level)


def lambda_handler(event, context) -> Dict[str, Any]:
    """
    Scheduled trigger: load config, measure, record

    The return value is informational; schedulers ignore it.
    """
    configure_logging()
    config = ConfigLoader(timeout=30).load()
    result = asyncio.run(run_pipeline(config))

    write = result.write
    if write is not None and not write.success:
        logger.error(f"Run finished without recording results: {write.error}")
    else:
        logger.info(
            f"Recorded {write.written if write else 0} of {result.fetch.requested} routes "
            f"({result.direction.label}, {result.fetch.skipped} skipped)"
        )

    return {
        "direction": result.direction.label,
        "requested": result.fetch.requested,
        "skipped": result.fetch.skipped,
        "written": write.written if write else 0,
        "write_success": write.success if write else False,
    }
