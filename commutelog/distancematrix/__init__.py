"""
Distance Matrix integration for commute measurements
"""

from .client import DistanceMatrixClient
from .fetcher import MAX_PERMUTATIONS, RouteBatchFetcher

__all__ = ["DistanceMatrixClient", "RouteBatchFetcher", "MAX_PERMUTATIONS"]
