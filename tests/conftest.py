"""Pytest configuration and fixtures."""

import json
from io import BytesIO
from unittest.mock import MagicMock

import pytest
from pydantic import BaseModel

from callwire.client.config import CallwireConfig
from callwire.client.executor import RequestExecutor
from callwire.client.registry import TransportRegistry
from callwire.client.response import Response


class User(BaseModel):
    id: str
    name: str


class APIError(BaseModel):
    code: int
    message: str


class FakeTransport:
    """Request transport that replays scripted outcomes.

    Each call consumes the next outcome; the last one repeats. An outcome
    is a Response to return or an exception to raise.
    """

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes) or [Response(b"{}", 200)]
        self.calls = []

    async def request(self, path, method, body=None, headers=None):
        self.calls.append({"path": path, "method": method, "body": body, "headers": headers})
        outcome = self.outcomes[min(len(self.calls), len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeStorage:
    """In-memory storage transport."""

    def __init__(self):
        self.objects = {}

    async def upload(self, data, path):
        self.objects[path] = data
        return f"memory://{path}"

    async def download(self, path):
        return self.objects[path]

    async def delete(self, path):
        self.objects.pop(path, None)


class RecordingListener:
    """Error listener that records every delivery."""

    def __init__(self):
        self.received = []

    async def did_receive(self, error, path):
        self.received.append((error, path))


class RecordingSleep:
    """Sleep replacement that records requested delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def user_json(user_id: str = "u1", name: str = "Ada") -> bytes:
    return json.dumps({"id": user_id, "name": name}).encode()


def error_json(code: int = 42, message: str = "nope") -> bytes:
    return json.dumps({"code": code, "message": message}).encode()


@pytest.fixture
def config():
    """Create a test config for HTTP transport."""
    return CallwireConfig(
        api_url="http://localhost:8000",
        timeout=30.0,
    )


@pytest.fixture
def lambda_config():
    """Create a test config for Lambda transport."""
    return CallwireConfig(
        transport="lambda",
        lambda_function_name="test-api",
        aws_region="us-east-1",
    )


@pytest.fixture
def registry():
    """Fresh, unconfigured registry."""
    return TransportRegistry()


@pytest.fixture
def listener():
    return RecordingListener()


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def executor(registry, sleep):
    """Executor bound to the test registry with recorded, instant sleeps."""
    return RequestExecutor(registry, sleep=sleep)


@pytest.fixture
def mock_lambda_client():
    """Create a mock boto3 Lambda client."""
    client = MagicMock()

    def make_response(body: dict, status_code: int = 200, function_error: bool = False):
        """Helper to create Lambda response."""
        response_body = {
            "statusCode": status_code,
            "body": json.dumps(body),
            "headers": {"Content-Type": "application/json"},
        }
        result = {
            "Payload": BytesIO(json.dumps(response_body).encode()),
        }
        if function_error:
            result["FunctionError"] = "Unhandled"
        return result

    # Default success response
    client.invoke.return_value = make_response({"status": "ok"})
    client.make_response = make_response

    return client
