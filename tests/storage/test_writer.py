"""
Tests for the DynamoDB result writer
"""

from datetime import datetime, timezone
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from commutelog.core.errors import ConfigurationError
from commutelog.core.models import CommuteDirection, RouteMeasurement
from commutelog.storage.writer import ResultWriter

# 2024-05-01 01:30 UTC is still April 30th at UTC-4
CAPTURE_TIME = datetime(2024, 5, 1, 1, 30, tzinfo=timezone.utc)


def make_measurements(count):
    return [
        RouteMeasurement(
            origin=f"{i} Home Rd",
            destination="1 Work Plaza",
            travel_time=f"{10 + i} mins"
        )
        for i in range(count)
    ]


class TestResultWriter:
    """Test ResultWriter"""

    @pytest.fixture
    def dynamodb(self):
        client = Mock()
        client.batch_write_item.return_value = {"UnprocessedItems": {}}
        return client

    @pytest.fixture
    def writer(self, dynamodb):
        return ResultWriter(table_name="commute-times", dynamodb_client=dynamodb)

    def test_build_records(self, writer):
        records = writer.build_records(
            make_measurements(3), CommuteDirection.WORK_TO_HOME, now=CAPTURE_TIME
        )

        assert len(records) == 3
        assert {r.commute for r in records} == {"work -> home"}
        assert {r.date for r in records} == {"2024/04/30"}
        assert {r.timestamp for r in records} == {1714527000}
        assert len({r.uuid for r in records}) == 3

    def test_write_single_bulk_call(self, writer, dynamodb):
        """One record per measurement, one backend call"""
        result = writer.write(
            make_measurements(5), CommuteDirection.HOME_TO_WORK, now=CAPTURE_TIME
        )

        assert result.success is True
        assert result.table == "commute-times"
        assert result.written == 5
        assert result.unprocessed == 0
        assert result.error is None

        dynamodb.batch_write_item.assert_called_once()
        request_items = dynamodb.batch_write_item.call_args[1]["RequestItems"]
        assert list(request_items) == ["commute-times"]

        items = [request["PutRequest"]["Item"] for request in request_items["commute-times"]]
        assert len(items) == 5
        assert len({item["uuid"]["S"] for item in items}) == 5
        assert items[0]["origin"] == {"S": "0 Home Rd"}
        assert items[0]["destination"] == {"S": "1 Work Plaza"}
        assert items[0]["travelTime"] == {"S": "10 mins"}
        assert items[0]["commute"] == {"S": "home -> work"}
        assert items[0]["date"] == {"S": "2024/04/30"}
        assert items[0]["timestamp"] == {"N": "1714527000"}

    def test_write_table_override(self, writer, dynamodb):
        result = writer.write(make_measurements(1), CommuteDirection.HOME_TO_WORK, table_name="other")

        assert result.table == "other"
        assert "other" in dynamodb.batch_write_item.call_args[1]["RequestItems"]

    def test_ids_not_reused_across_runs(self, writer, dynamodb):
        measurements = make_measurements(2)
        writer.write(measurements, CommuteDirection.HOME_TO_WORK)
        writer.write(measurements, CommuteDirection.HOME_TO_WORK)

        ids = set()
        for call in dynamodb.batch_write_item.call_args_list:
            for request in call[1]["RequestItems"]["commute-times"]:
                ids.add(request["PutRequest"]["Item"]["uuid"]["S"])
        assert len(ids) == 4

    def test_write_client_error(self, writer, dynamodb):
        """Backend failures come back as a failed result"""
        dynamodb.batch_write_item.side_effect = ClientError(
            {"Error": {"Code": "ResourceNotFoundException", "Message": "Requested resource not found"}},
            "BatchWriteItem",
        )

        result = writer.write(make_measurements(2), CommuteDirection.HOME_TO_WORK)

        assert result.success is False
        assert result.written == 0
        assert "ResourceNotFoundException" in result.error

    def test_write_connection_error(self, writer, dynamodb):
        dynamodb.batch_write_item.side_effect = EndpointConnectionError(
            endpoint_url="https://dynamodb.us-east-1.amazonaws.com"
        )

        result = writer.write(make_measurements(1), CommuteDirection.HOME_TO_WORK)

        assert result.success is False
        assert "Batch write error" in result.error

    def test_write_unprocessed_items(self, writer, dynamodb):
        dynamodb.batch_write_item.return_value = {
            "UnprocessedItems": {"commute-times": [{"PutRequest": {"Item": {}}}]}
        }

        result = writer.write(make_measurements(3), CommuteDirection.HOME_TO_WORK)

        assert result.success is True
        assert result.written == 2
        assert result.unprocessed == 1

    def test_write_nothing(self, writer, dynamodb):
        """No measurements means no backend call"""
        result = writer.write([], CommuteDirection.HOME_TO_WORK)

        assert result.success is True
        assert result.written == 0
        dynamodb.batch_write_item.assert_not_called()

    def test_client_created_lazily(self):
        factory = Mock()
        factory.return_value.batch_write_item.return_value = {}
        writer = ResultWriter(table_name="commute-times", client_factory=factory)

        factory.assert_not_called()
        writer.write(make_measurements(1), CommuteDirection.HOME_TO_WORK)
        writer.write(make_measurements(1), CommuteDirection.HOME_TO_WORK)

        factory.assert_called_once()

    def test_client_creation_failure_is_returned(self):
        """Credential problems at write time come back as a failed result"""
        factory = Mock(side_effect=ConfigurationError(
            "AWS credentials file auth.json must contain accessKeyId and secretAccessKey"
        ))
        writer = ResultWriter(table_name="commute-times", client_factory=factory)

        result = writer.write(make_measurements(2), CommuteDirection.HOME_TO_WORK)

        assert result.success is False
        assert result.written == 0
        assert "accessKeyId" in result.error
