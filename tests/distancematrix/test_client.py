"""
Tests for the Distance Matrix client
"""

import os
from unittest.mock import patch
from urllib.parse import parse_qs, urlsplit

import httpx
import pytest

from commutelog.core.errors import RemoteFetchError
from commutelog.core.models import RouteMeasurement
from commutelog.distancematrix.client import DISTANCE_MATRIX_ENDPOINT, DistanceMatrixClient


def make_response(payload=None, status_code=200, text=None):
    request = httpx.Request("GET", DISTANCE_MATRIX_ENDPOINT)
    if text is not None:
        return httpx.Response(status_code, text=text, request=request)
    return httpx.Response(status_code, json=payload, request=request)


def ok_payload(travel_time="15 mins", origin="123 Main St, Springfield, IL, USA",
               destination="1 Work Plaza, Springfield, IL, USA"):
    return {
        "status": "OK",
        "origin_addresses": [origin],
        "destination_addresses": [destination],
        "rows": [{
            "elements": [{
                "status": "OK",
                "duration": {"text": travel_time, "value": 900},
                "distance": {"text": "5.2 mi", "value": 8368},
            }]
        }],
    }


class TestDistanceMatrixClient:
    """Test Distance Matrix client"""

    def test_client_initialization(self):
        client = DistanceMatrixClient(api_key="test_key")

        assert client.api_key == "test_key"
        assert client.base_url == "https://maps.googleapis.com/maps/api/distancematrix/json"
        assert client.language == "en-EN"
        assert client.timeout == 30

    def test_client_initialization_from_env(self):
        with patch.dict(os.environ, {"GOOGLE_MAPS_API_KEY": "env_key"}):
            client = DistanceMatrixClient()
            assert client.api_key == "env_key"

    def test_client_missing_key(self):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ValueError, match="Google Maps API key required"):
                DistanceMatrixClient()

    def test_build_params(self):
        client = DistanceMatrixClient(api_key="test_key")
        params = client.build_params("123 Main St", "1 Work Plaza")

        assert params == {
            "units": "imperial",
            "mode": "driving",
            "key": "test_key",
            "language": "en-EN",
            "origins": "123 Main St",
            "destinations": "1 Work Plaza",
        }

    def test_build_url_encodes_whitespace_as_plus(self):
        client = DistanceMatrixClient(api_key="test_key")
        url = client.build_url("123 Main St", "1 Work\tPlaza, Suite #4")

        assert url.startswith(DISTANCE_MATRIX_ENDPOINT + "?")
        assert "origins=123+Main+St" in url
        assert "destinations=1+Work+Plaza%2C+Suite+%234" in url
        assert " " not in url

        query = parse_qs(urlsplit(url).query)
        assert query["destinations"] == ["1 Work Plaza, Suite #4"]
        assert query["mode"] == ["driving"]
        assert query["units"] == ["imperial"]

    def test_parse_response_success(self):
        client = DistanceMatrixClient(api_key="test_key")
        result = client.parse_response(make_response(ok_payload()), "123 Main St", "1 Work Plaza")

        assert isinstance(result, RouteMeasurement)
        # Normalized addresses come from the API
        assert result.origin == "123 Main St, Springfield, IL, USA"
        assert result.destination == "1 Work Plaza, Springfield, IL, USA"
        assert result.travel_time == "15 mins"

    def test_parse_response_without_addresses_uses_query(self):
        client = DistanceMatrixClient(api_key="test_key")
        payload = {"status": "OK", "rows": [{"elements": [{"duration": {"text": "15 mins"}}]}]}

        result = client.parse_response(make_response(payload), "123 Main St", "1 Work Plaza")

        assert result.origin == "123 Main St"
        assert result.destination == "1 Work Plaza"
        assert result.travel_time == "15 mins"

    @pytest.mark.parametrize("response", [
        make_response(ok_payload(), status_code=500),
        make_response({"status": "REQUEST_DENIED", "error_message": "bad key", "rows": []}),
        make_response({"status": "OK", "rows": []}),
        make_response({"status": "OK"}),
        make_response({"status": "OK", "rows": [{"elements": [{"status": "NOT_FOUND"}]}]}),
        make_response({"status": "OK", "rows": [{"elements": []}]}),
        make_response(text="not json"),
        make_response(["unexpected"]),
    ])
    def test_parse_response_rejects_bad_responses(self, response):
        client = DistanceMatrixClient(api_key="test_key")

        with pytest.raises(RemoteFetchError):
            client.parse_response(response, "A St", "B St")

    def test_parse_response_reports_api_error_message(self):
        client = DistanceMatrixClient(api_key="test_key")
        response = make_response({"status": "REQUEST_DENIED", "error_message": "bad key"})

        with pytest.raises(RemoteFetchError, match="REQUEST_DENIED.*bad key"):
            client.parse_response(response, "A St", "B St")

    @pytest.mark.asyncio
    async def test_get_route_success(self):
        client = DistanceMatrixClient(api_key="test_key")

        with patch("httpx.AsyncClient.get") as mock_get:
            mock_get.return_value = make_response(ok_payload(travel_time="22 mins"))

            async with client.create_http_client() as http_client:
                result = await client.get_route(http_client, "123 Main St", "1 Work Plaza")

            assert result.travel_time == "22 mins"

            mock_get.assert_called_once()
            url = mock_get.call_args[0][0]
            assert "origins=123+Main+St" in url
            assert "destinations=1+Work+Plaza" in url
            assert "key=test_key" in url

    @pytest.mark.asyncio
    async def test_get_route_http_error(self):
        client = DistanceMatrixClient(api_key="test_key")

        with patch("httpx.AsyncClient.get") as mock_get:
            mock_get.side_effect = httpx.ConnectTimeout("timed out")

            async with client.create_http_client() as http_client:
                with pytest.raises(RemoteFetchError, match="timed out"):
                    await client.get_route(http_client, "A St", "B St")
