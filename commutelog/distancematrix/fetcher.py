"""
Batch fetching of driving times for every home/work combination
"""

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from commutelog.core.errors import ConfigurationError, PermutationLimitError, RemoteFetchError
from commutelog.core.models import (
    DEFAULT_UTC_OFFSET_HOURS,
    CommuteDirection,
    FetchReport,
    RouteMeasurement,
)

from .client import DistanceMatrixClient

# Keeps a run well inside a short serverless time limit
MAX_PERMUTATIONS = 20


def build_route_pairs(
    home: Sequence[str],
    work: Sequence[str],
    direction: CommuteDirection
) -> List[Tuple[str, str]]:
    """
    (origin, destination) pairs in query order

    Outer loop over work addresses, inner loop over home addresses.
    """
    pairs = []
    for work_address in work:
        for home_address in home:
            if direction is CommuteDirection.HOME_TO_WORK:
                pairs.append((home_address, work_address))
            else:
                pairs.append((work_address, home_address))
    return pairs


def check_permutations(home: Sequence[str], work: Sequence[str]) -> int:
    """Validate address lists before any request is made; returns the pair count"""
    if not home or not work:
        raise ConfigurationError(
            "Could not find location pair to measure. "
            "Ensure you have provided at least one home and one work location."
        )

    permutations = len(home) * len(work)
    if permutations > MAX_PERMUTATIONS:
        raise PermutationLimitError(permutations, MAX_PERMUTATIONS)
    return permutations


class RouteBatchFetcher:
    """
    Fetches driving times for the full home x work cross product

    All queries run concurrently; pairs with bad responses are dropped and
    counted, the rest of the batch still succeeds.
    """

    def __init__(
        self,
        client: DistanceMatrixClient,
        utc_offset_hours: float = DEFAULT_UTC_OFFSET_HOURS
    ):
        self.client = client
        self.utc_offset_hours = utc_offset_hours
        self.logger = logging.getLogger(__name__)

    async def fetch(
        self,
        home: Sequence[str],
        work: Sequence[str],
        direction: Optional[CommuteDirection] = None
    ) -> List[RouteMeasurement]:
        """Measurements for every pair that returned a usable response"""
        report = await self.fetch_report(home, work, direction)
        return report.measurements

    async def fetch_report(
        self,
        home: Sequence[str],
        work: Sequence[str],
        direction: Optional[CommuteDirection] = None
    ) -> FetchReport:
        """
        Query every home/work pair and collect the results

        Args:
            home: Home addresses
            work: Work addresses
            direction: Commute direction (derived from the clock if None)

        Returns:
            FetchReport with measurements in query order and the skipped count

        Raises:
            ConfigurationError: If either address list is empty
            PermutationLimitError: If there are too many pairs
        """
        check_permutations(home, work)

        if direction is None:
            direction = CommuteDirection.now(self.utc_offset_hours)

        pairs = build_route_pairs(home, work, direction)
        self.logger.info(f"Requesting {len(pairs)} routes ({direction.label})")

        async with self.client.create_http_client() as http_client:
            tasks = [
                self.client.get_route(http_client, origin, destination)
                for origin, destination in pairs
            ]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        measurements = []
        skipped = 0
        for (origin, destination), result in zip(pairs, results):
            if isinstance(result, RouteMeasurement):
                measurements.append(result)
            elif isinstance(result, RemoteFetchError):
                skipped += 1
                self.logger.warning(f"Dropping route: {result}")
            elif isinstance(result, Exception):
                skipped += 1
                self.logger.error(f"Unexpected error for {origin} -> {destination}: {result}")
            else:
                # CancelledError and friends are not ours to swallow
                raise result

        if skipped:
            self.logger.warning(f"Skipped {skipped} of {len(pairs)} routes")

        return FetchReport(
            direction=direction,
            measurements=measurements,
            requested=len(pairs),
            skipped=skipped,
        )
