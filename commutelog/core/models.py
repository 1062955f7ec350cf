"""
Core data models for commute measurements and stored records
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, List, Optional
from uuid import uuid1

from pydantic import BaseModel, ConfigDict, Field

# Reference offset for deciding morning vs. afternoon (UTC-4)
DEFAULT_UTC_OFFSET_HOURS = -4.0

DATE_FORMAT = "%Y/%m/%d"


def fixed_offset(utc_offset_hours: float) -> timezone:
    """Fixed UTC offset timezone (no DST rules)"""
    return timezone(timedelta(hours=utc_offset_hours))


def to_fixed_offset(instant: datetime, utc_offset_hours: float) -> datetime:
    """Convert an instant to the given fixed offset; naive values are taken as UTC"""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(fixed_offset(utc_offset_hours))


class CommuteDirection(str, Enum):
    """Which way the commute goes for every query of a run"""

    HOME_TO_WORK = "home_to_work"
    WORK_TO_HOME = "work_to_home"

    @property
    def label(self) -> str:
        """Human-readable commute label stored with each record"""
        if self is CommuteDirection.HOME_TO_WORK:
            return "home -> work"
        return "work -> home"

    @classmethod
    def at(
        cls,
        instant: datetime,
        utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS
    ) -> "CommuteDirection":
        """
        Direction for a point in time

        Afternoon (12:00 onwards at the fixed offset) is the trip home,
        anything earlier is the trip to work.
        """
        local = to_fixed_offset(instant, utc_offset_hours)
        if local.hour >= 12:
            return cls.WORK_TO_HOME
        return cls.HOME_TO_WORK

    @classmethod
    def now(cls, utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS) -> "CommuteDirection":
        return cls.at(datetime.now(timezone.utc), utc_offset_hours)


class RouteMeasurement(BaseModel):
    """Driving time for one origin/destination pair, as reported by the API"""

    origin: str = Field(description="Origin address as resolved by the API")
    destination: str = Field(description="Destination address as resolved by the API")
    travel_time: str = Field(description="Travel time display text, e.g. '15 mins'")


class CommuteRecord(BaseModel):
    """Persisted commute measurement"""

    model_config = ConfigDict(populate_by_name=True)

    uuid: str = Field(default_factory=lambda: str(uuid1()), description="Time-based unique id")
    origin: str
    destination: str
    travel_time: str = Field(alias="travelTime")
    commute: str = Field(description="Commute label, e.g. 'home -> work'")
    date: str = Field(description="Capture date (YYYY/MM/DD)")
    timestamp: int = Field(description="Run timestamp in seconds since epoch")

    @classmethod
    def from_measurement(
        cls,
        measurement: RouteMeasurement,
        commute: str,
        date: str,
        timestamp: int
    ) -> "CommuteRecord":
        return cls(
            origin=measurement.origin,
            destination=measurement.destination,
            travel_time=measurement.travel_time,
            commute=commute,
            date=date,
            timestamp=timestamp,
        )

    def to_dynamodb_item(self) -> Dict[str, Dict[str, str]]:
        """Typed attribute map for DynamoDB; all strings except the numeric timestamp"""
        return {
            "uuid": {"S": self.uuid},
            "origin": {"S": self.origin},
            "destination": {"S": self.destination},
            "travelTime": {"S": self.travel_time},
            "commute": {"S": self.commute},
            "date": {"S": self.date},
            "timestamp": {"N": str(self.timestamp)},
        }


class FetchReport(BaseModel):
    """Outcome of one batch of distance queries"""

    direction: CommuteDirection
    measurements: List[RouteMeasurement] = Field(default_factory=list)
    requested: int = Field(0, description="Number of queries issued")
    skipped: int = Field(0, description="Queries dropped for bad responses")


class WriteResult(BaseModel):
    """Outcome of the bulk write"""

    success: bool
    table: str
    written: int = Field(0, description="Records accepted by the backend")
    unprocessed: int = Field(0, description="Records returned as unprocessed")
    error: Optional[str] = Field(None, description="Error message if the write failed")


class PipelineResult(BaseModel):
    """Everything a single run produced"""

    direction: CommuteDirection
    fetch: FetchReport
    write: Optional[WriteResult] = Field(None, description="None when writing was skipped")
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
