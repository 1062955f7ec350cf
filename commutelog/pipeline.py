"""
Fetch-and-record pipeline shared by the Lambda handler and the CLI
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from commutelog.config.models import CommuteLogConfig
from commutelog.core.models import CommuteDirection, PipelineResult
from commutelog.distancematrix.client import DistanceMatrixClient
from commutelog.distancematrix.fetcher import RouteBatchFetcher
from commutelog.storage.session import create_dynamodb_client, load_auth_file
from commutelog.storage.writer import ResultWriter

logger = logging.getLogger(__name__)


def build_fetcher(config: CommuteLogConfig) -> RouteBatchFetcher:
    client = DistanceMatrixClient(
        api_key=config.google.key,
        language=config.language,
        timeout=config.timeout,
    )
    return RouteBatchFetcher(client, utc_offset_hours=config.utc_offset_hours)


def build_writer(
    config: CommuteLogConfig,
    dynamodb_client=None,
    auth_file: Optional[Union[str, Path]] = None
) -> ResultWriter:
    """
    Writer for the configured table

    An auth file is read here so a bad one fails before any request is sent.
    """
    if auth_file:
        load_auth_file(auth_file)

    return ResultWriter(
        table_name=config.aws.table,
        dynamodb_client=dynamodb_client,
        utc_offset_hours=config.utc_offset_hours,
        client_factory=lambda: create_dynamodb_client(config.aws.region, auth_file),
    )


async def run_pipeline(
    config: CommuteLogConfig,
    fetcher: Optional[RouteBatchFetcher] = None,
    writer: Optional[ResultWriter] = None,
    now: Optional[datetime] = None,
    dry_run: bool = False
) -> PipelineResult:
    """
    Measure every configured commute and record the results

    Args:
        config: Run configuration
        fetcher: Route fetcher (built from config if None)
        writer: Result writer (built from config if None)
        now: Run time, decides direction and capture date (defaults to now)
        dry_run: Fetch only, do not write

    Returns:
        PipelineResult for the run

    Raises:
        ConfigurationError: If an address list is empty
        PermutationLimitError: If there are too many address pairs
    """
    if now is None:
        now = datetime.now(timezone.utc)

    direction = CommuteDirection.at(now, config.utc_offset_hours)

    if fetcher is None:
        fetcher = build_fetcher(config)

    report = await fetcher.fetch_report(
        config.locations.home,
        config.locations.work,
        direction=direction,
    )

    write_result = None
    if dry_run:
        logger.info("Dry run: skipping write")
    else:
        if writer is None:
            writer = build_writer(config)
        write_result = writer.write(
            report.measurements,
            direction,
            table_name=config.aws.table,
            now=now,
        )

    return PipelineResult(
        direction=direction,
        fetch=report,
        write=write_result,
        started_at=now,
    )
