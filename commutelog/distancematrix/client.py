"""
Google Distance Matrix client for driving times
"""

import logging
import os
import re
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus, urlencode

import httpx

from commutelog.core.errors import RemoteFetchError
from commutelog.core.models import RouteMeasurement

DISTANCE_MATRIX_ENDPOINT = "https://maps.googleapis.com/maps/api/distancematrix/json"

_WHITESPACE = re.compile(r"\s")


def _first(values: Optional[List[str]]) -> Optional[str]:
    if isinstance(values, list) and values and values[0]:
        return values[0]
    return None


class DistanceMatrixClient:
    """
    Async client for the Distance Matrix API
    One request per origin/destination pair, driving mode, imperial units
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        language: str = "en-EN",
        timeout: int = 30
    ):
        self.api_key = api_key or os.getenv("GOOGLE_MAPS_API_KEY")
        self.base_url = DISTANCE_MATRIX_ENDPOINT
        self.language = language
        self.timeout = timeout
        self.logger = logging.getLogger(__name__)

        if not self.api_key:
            raise ValueError(
                "Google Maps API key required. Set google.key in config or GOOGLE_MAPS_API_KEY"
            )

    def build_params(self, origin: str, destination: str) -> Dict[str, str]:
        """Query parameters for one pair"""
        return {
            "units": "imperial",
            "mode": "driving",
            "key": self.api_key,
            "language": self.language,
            "origins": _WHITESPACE.sub(" ", origin),
            "destinations": _WHITESPACE.sub(" ", destination),
        }

    def build_url(self, origin: str, destination: str) -> str:
        """Full request URL; whitespace in addresses is encoded as '+'"""
        query = urlencode(self.build_params(origin, destination), quote_via=quote_plus)
        return f"{self.base_url}?{query}"

    def create_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout)

    async def get_route(
        self,
        client: httpx.AsyncClient,
        origin: str,
        destination: str
    ) -> RouteMeasurement:
        """
        Query driving time for a single pair

        Args:
            client: Shared HTTP client for the batch
            origin: Origin address
            destination: Destination address

        Returns:
            RouteMeasurement with the API's normalized addresses

        Raises:
            RemoteFetchError: On transport failure or an unusable response
        """
        try:
            response = await client.get(self.build_url(origin, destination))
        except httpx.HTTPError as e:
            raise RemoteFetchError(origin, destination, f"HTTP error: {e}")

        return self.parse_response(response, origin, destination)

    def parse_response(
        self,
        response: httpx.Response,
        origin: str,
        destination: str
    ) -> RouteMeasurement:
        """Accept only HTTP 200 with status OK and at least one result row"""
        if response.status_code != 200:
            raise RemoteFetchError(origin, destination, f"HTTP {response.status_code}")

        try:
            data: Any = response.json()
        except ValueError as e:
            raise RemoteFetchError(origin, destination, f"invalid JSON body: {e}")

        if not isinstance(data, dict):
            raise RemoteFetchError(origin, destination, "unexpected response body")

        status = data.get("status")
        if status != "OK":
            message = data.get("error_message")
            reason = f"status {status}" + (f" ({message})" if message else "")
            raise RemoteFetchError(origin, destination, reason)

        rows = data.get("rows")
        if not rows:
            raise RemoteFetchError(origin, destination, "no rows in response")

        try:
            element = rows[0]["elements"][0]
            element_status = element.get("status", "OK")
            if element_status != "OK":
                raise RemoteFetchError(origin, destination, f"element status {element_status}")
            travel_time = element["duration"]["text"]
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise RemoteFetchError(origin, destination, f"malformed result row: {e!r}")

        return RouteMeasurement(
            origin=_first(data.get("origin_addresses")) or origin,
            destination=_first(data.get("destination_addresses")) or destination,
            travel_time=travel_time,
        )
