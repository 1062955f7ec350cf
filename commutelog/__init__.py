"""
CommuteLog: Scheduled Commute Time Recorder

Measures driving times between configured home and work addresses with the
Google Distance Matrix API and appends them to DynamoDB for trend analysis.
"""

__version__ = "0.1.0"

from .config.models import CommuteLogConfig
from .core.models import CommuteDirection, CommuteRecord, RouteMeasurement
from .pipeline import run_pipeline

__all__ = [
    "CommuteLogConfig",
    "CommuteDirection",
    "CommuteRecord",
    "RouteMeasurement",
    "run_pipeline",
]
