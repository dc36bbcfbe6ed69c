from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ProfileNotFound
from botocore.stub import Stubber

from lambda_fleet_tool.aws import create_session, is_authorization_error, is_not_found_error
from lambda_fleet_tool.aws.lambda_manager import LambdaManager
from lambda_fleet_tool.aws.logs_manager import LogsManager, log_group_name
from lambda_fleet_tool.errors import AuthorizationError, QueryFailure

from .conftest import client_error

LAYER = "arn:aws:lambda:us-east-2:123456789012:layer:deps:3"


@pytest.fixture
def lambda_manager(session):
    return LambdaManager(session)


@pytest.fixture
def logs_manager(session):
    return LogsManager(session)


def test_list_functions_follows_pages(lambda_manager):
    with Stubber(lambda_manager.client) as stubber:
        stubber.add_response("list_functions", {
            "Functions": [
                {"FunctionName": "A", "Runtime": "python3.9", "Layers": [{"Arn": LAYER}]},
                {"FunctionName": "img"},
            ],
            "NextMarker": "page-2",
        })
        stubber.add_response("list_functions", {
            "Functions": [{"FunctionName": "C", "Runtime": "nodejs18.x"}],
        }, {"Marker": "page-2"})

        records = lambda_manager.list_functions()

    assert [(r.name, r.runtime, r.layers) for r in records] == [
        ("A", "python3.9", (LAYER,)),
        ("img", "", ()),
        ("C", "nodejs18.x", ()),
    ]


def test_list_functions_access_denied(lambda_manager):
    with Stubber(lambda_manager.client) as stubber:
        stubber.add_client_error("list_functions", "AccessDeniedException", "not allowed")

        with pytest.raises(AuthorizationError):
            lambda_manager.list_functions()


def test_list_functions_other_failure(lambda_manager):
    with Stubber(lambda_manager.client) as stubber:
        stubber.add_client_error("list_functions", "InvalidParameterValueException", "bad marker")

        with pytest.raises(QueryFailure, match="Failed to list Lambda functions: bad marker"):
            lambda_manager.list_functions()


def test_update_sends_runtime_and_layers_together(lambda_manager):
    with Stubber(lambda_manager.client) as stubber:
        stubber.add_response(
            "update_function_configuration",
            {"FunctionName": "A", "Runtime": "python3.12", "LastUpdateStatus": "InProgress"},
            {"FunctionName": "A", "Runtime": "python3.12", "Layers": [LAYER]},
        )

        ack = lambda_manager.update_function_configuration("A", runtime="python3.12", layers=[LAYER])

        stubber.assert_no_pending_responses()
    assert ack["Runtime"] == "python3.12"


def test_update_requires_a_change(lambda_manager):
    with pytest.raises(ValueError):
        lambda_manager.update_function_configuration("A")


def test_update_is_not_retried(lambda_manager):
    lambda_manager._client = MagicMock()
    lambda_manager._client.update_function_configuration.side_effect = client_error("TooManyRequestsException")

    with pytest.raises(Exception):
        lambda_manager.update_function_configuration("A", runtime="python3.12")

    assert lambda_manager._client.update_function_configuration.call_count == 1


def test_get_function_not_found(lambda_manager):
    with Stubber(lambda_manager.client) as stubber:
        stubber.add_client_error("get_function", "ResourceNotFoundException", "missing")

        assert lambda_manager.get_function("ghost") is None


def test_latest_event_timestamp(logs_manager):
    with Stubber(logs_manager.client) as stubber:
        stubber.add_response(
            "describe_log_streams",
            {"logStreams": [{"logStreamName": "s", "lastEventTimestamp": 1717243200000}]},
            {"logGroupName": "/aws/lambda/A", "orderBy": "LastEventTime", "descending": True, "limit": 1},
        )

        assert logs_manager.latest_event_timestamp("A") == 1717243200000


def test_latest_event_timestamp_without_streams(logs_manager):
    with Stubber(logs_manager.client) as stubber:
        stubber.add_response("describe_log_streams", {"logStreams": []})
        assert logs_manager.latest_event_timestamp("A") is None


def test_latest_event_timestamp_without_log_group(logs_manager):
    with Stubber(logs_manager.client) as stubber:
        stubber.add_client_error("describe_log_streams", "ResourceNotFoundException", "no group")
        assert logs_manager.latest_event_timestamp("A") is None


def test_latest_event_timestamp_retries_throttling(logs_manager):
    logs_manager._client = MagicMock()
    logs_manager._client.describe_log_streams.side_effect = [
        client_error("ThrottlingException"),
        {"logStreams": [{"lastEventTimestamp": 42}]},
    ]

    with patch("lambda_fleet_tool.aws.time.sleep") as sleep:
        assert logs_manager.latest_event_timestamp("A") == 42

    sleep.assert_called_once_with(1.0)


def test_latest_event_timestamp_access_denied_propagates(logs_manager):
    logs_manager._client = MagicMock()
    logs_manager._client.describe_log_streams.side_effect = client_error("AccessDeniedException")

    with pytest.raises(Exception):
        logs_manager.latest_event_timestamp("A")
    assert logs_manager._client.describe_log_streams.call_count == 1


def test_log_group_name():
    assert log_group_name("orders") == "/aws/lambda/orders"


def test_error_classification():
    assert is_authorization_error(client_error("ExpiredToken"))
    assert not is_authorization_error(client_error("ThrottlingException"))
    assert is_not_found_error(client_error("ResourceNotFoundException"))
    assert not is_not_found_error(RuntimeError("x"))


def test_create_session_with_unknown_profile():
    with patch("lambda_fleet_tool.aws.boto3.session.Session", side_effect=ProfileNotFound(profile="nope")):
        with pytest.raises(AuthorizationError, match="'nope' not found"):
            create_session("nope", "us-east-2")


def test_default_profile_uses_credential_chain():
    with patch("lambda_fleet_tool.aws.boto3.session.Session") as session_cls:
        create_session("default", "eu-west-1")
    session_cls.assert_called_once_with(profile_name=None, region_name="eu-west-1")
