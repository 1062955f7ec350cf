"""
Core data models and errors for CommuteLog
"""

from .errors import (
    CommuteLogError,
    ConfigurationError,
    PermutationLimitError,
    PersistenceError,
    RemoteFetchError,
)
from .models import (
    CommuteDirection,
    CommuteRecord,
    FetchReport,
    PipelineResult,
    RouteMeasurement,
    WriteResult,
)

__all__ = [
    # Models
    "CommuteDirection",
    "CommuteRecord",
    "FetchReport",
    "PipelineResult",
    "RouteMeasurement",
    "WriteResult",
    # Errors
    "CommuteLogError",
    "ConfigurationError",
    "PermutationLimitError",
    "PersistenceError",
    "RemoteFetchError",
]
