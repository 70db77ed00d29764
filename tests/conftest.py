"""
Shared test fixtures and helpers for the sfdc-tool test suite.
"""

from collections import defaultdict, deque
from typing import Any, Callable, Dict, List, Optional, Union

import pytest

from sfdc_tool.models.config import ClientConfig, Credentials, PollingConfig
from sfdc_tool.transport.base import CallResult, Transport


SERVER_URL = "https://na1.salesforce.com/services/Soap/u/33.0/00D000000000001"
METADATA_URL = "https://na1.salesforce.com/services/Soap/m/33.0/00D000000000001"


# ============================================================================
# Transport double
# ============================================================================


Scripted = Union[CallResult, Callable[..., CallResult]]


class FakeTransport(Transport):
    """Transport that replays scripted results and records every call.

    ``login`` answers automatically with a fresh session id per call
    (``SESSION-1``, ``SESSION-2``...) unless a login result is scripted.
    """

    def __init__(self, responses: Optional[Dict[str, List[Scripted]]] = None):
        super().__init__()
        self.responses = defaultdict(deque)
        for operation, results in (responses or {}).items():
            self.responses[operation].extend(results)
        self.calls: List[Dict[str, Any]] = []
        self.logins = 0
        self.closed = False

    def script(self, operation: str, *results: Scripted) -> "FakeTransport":
        self.responses[operation].extend(results)
        return self

    def call(self, endpoint_url, namespace, operation, headers=None, parameters=()):
        self.calls.append({
            "endpoint": endpoint_url,
            "namespace": namespace,
            "operation": operation,
            "headers": headers,
            "parameters": list(parameters),
        })

        if operation == "login" and not self.responses["login"]:
            self.logins += 1
            return CallResult.ok(login_result(f"SESSION-{self.logins}"))

        if operation == "login":
            self.logins += 1

        if not self.responses[operation]:
            raise AssertionError(f"Unexpected call to {operation}")

        scripted = self.responses[operation].popleft()
        if callable(scripted):
            return scripted(endpoint_url, namespace, operation, headers, parameters)
        return scripted

    def operations(self) -> List[str]:
        return [call["operation"] for call in self.calls]

    def calls_to(self, operation: str) -> List[Dict[str, Any]]:
        return [call for call in self.calls if call["operation"] == operation]

    def close(self) -> None:
        self.closed = True


def login_result(session_id: str = "SESSION-1", sandbox: str = "true") -> Dict[str, Any]:
    """Result of a successful login call."""
    return {
        "sessionId": session_id,
        "serverUrl": SERVER_URL,
        "metadataServerUrl": METADATA_URL,
        "sandbox": sandbox,
        "userId": "005000000000001",
    }


def session_fault() -> CallResult:
    return CallResult.fault(
        "INVALID_SESSION_ID: Invalid Session ID found in SessionHeader",
        "sf:INVALID_SESSION_ID",
    )


class SleepRecorder:
    """Sleep function that records requested durations instead of sleeping."""

    def __init__(self):
        self.calls: List[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def credentials():
    return Credentials(
        username="admin@example.com.dev",
        password="secret+token",
        url="https://test.salesforce.com/",
        api_version="33.0",
    )


@pytest.fixture
def client_config(credentials):
    return ClientConfig(credentials=credentials, polling=PollingConfig(interval=5))


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def gateway(credentials, transport):
    from sfdc_tool.core.session import SessionGateway
    return SessionGateway(credentials, transport)
