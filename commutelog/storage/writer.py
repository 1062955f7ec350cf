"""
Writes commute measurements to DynamoDB as append-only records
"""

import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from commutelog.core.errors import ConfigurationError, PersistenceError
from commutelog.core.models import (
    DATE_FORMAT,
    DEFAULT_UTC_OFFSET_HOURS,
    CommuteDirection,
    CommuteRecord,
    RouteMeasurement,
    WriteResult,
    to_fixed_offset,
)

from .session import create_dynamodb_client


class ResultWriter:
    """
    Bulk writer for CommuteRecords

    Each call builds one record per measurement and submits them in a single
    BatchWriteItem request. Failures are logged and returned, never raised.
    """

    def __init__(
        self,
        table_name: str,
        dynamodb_client=None,
        utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS,
        client_factory: Callable = create_dynamodb_client
    ):
        self.table_name = table_name
        self.utc_offset_hours = utc_offset_hours
        self._client = dynamodb_client
        self._client_factory = client_factory
        self.logger = logging.getLogger(__name__)

    @property
    def client(self):
        """DynamoDB client, created on first use"""
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def build_records(
        self,
        measurements: Sequence[RouteMeasurement],
        direction: CommuteDirection,
        now: Optional[datetime] = None
    ) -> List[CommuteRecord]:
        """One record per measurement; date, timestamp and label are shared by the batch"""
        if now is None:
            now = datetime.now(timezone.utc)

        timestamp = round(to_fixed_offset(now, 0).timestamp())
        date = to_fixed_offset(now, self.utc_offset_hours).strftime(DATE_FORMAT)

        return [
            CommuteRecord.from_measurement(
                measurement,
                commute=direction.label,
                date=date,
                timestamp=timestamp,
            )
            for measurement in measurements
        ]

    def write(
        self,
        measurements: Sequence[RouteMeasurement],
        direction: CommuteDirection,
        table_name: Optional[str] = None,
        now: Optional[datetime] = None
    ) -> WriteResult:
        """
        Persist measurements as new records

        Args:
            measurements: Results of this run
            direction: Direction of this run, used for the commute label
            table_name: Target table (defaults to the writer's table)
            now: Capture time (defaults to the current time)

        Returns:
            WriteResult describing success or failure
        """
        table = table_name or self.table_name

        if not measurements:
            self.logger.warning("No measurements to record")
            return WriteResult(success=True, table=table, written=0)

        records = self.build_records(measurements, direction, now)
        request_items = {
            table: [
                {"PutRequest": {"Item": record.to_dynamodb_item()}}
                for record in records
            ]
        }

        try:
            response = self.client.batch_write_item(RequestItems=request_items)
        except ConfigurationError as e:
            error = PersistenceError(f"Batch write error: no DynamoDB client: {e}")
            self.logger.error(str(error))
            return WriteResult(success=False, table=table, error=str(error))
        except (ClientError, BotoCoreError) as e:
            error = PersistenceError(f"Batch write error: {e}")
            self.logger.error(str(error))
            return WriteResult(success=False, table=table, error=str(error))

        unprocessed = len((response or {}).get("UnprocessedItems", {}).get(table, []))
        if unprocessed:
            self.logger.warning(f"{unprocessed} of {len(records)} records were not processed")

        written = len(records) - unprocessed
        self.logger.info(f"Batch write recorded {written} records to {table}")

        return WriteResult(
            success=True,
            table=table,
            written=written,
            unprocessed=unprocessed,
        )
