import os
from unittest.mock import MagicMock

import boto3
import pytest
from botocore.exceptions import ClientError

from lambda_fleet_tool.models import FunctionRecord


@pytest.fixture(scope="module", autouse=True)
def aws_credentials():
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-2"


@pytest.fixture
def session():
    return boto3.session.Session(region_name="us-east-2")


def client_error(code, message="boom", operation="Operation"):
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


def record(name, runtime="python3.9", layers=(), last=None):
    return FunctionRecord(name=name, runtime=runtime, layers=tuple(layers), last_invocation=last)


class FakeClock:
    """Monotonic clock that only moves when sleep() is called"""

    def __init__(self, start=1000.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def lambda_mgr():
    mgr = MagicMock()
    mgr.region = "us-east-2"
    mgr.get_function_configuration.return_value = {"LastUpdateStatus": "Successful"}
    return mgr


@pytest.fixture
def logs_mgr():
    mgr = MagicMock()
    mgr.latest_event_timestamp.return_value = None
    return mgr
