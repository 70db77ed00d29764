"""
Tests for SessionGateway (core/session.py).
"""

import threading

import pytest

from sfdc_tool.api.exceptions import LoginError, OperationFault, SessionExpiredRetryExhausted
from sfdc_tool.constants import APEX_NAMESPACE, METADATA_NAMESPACE, PARTNER_NAMESPACE
from sfdc_tool.core.session import ApiEndpoint, CallOutcome, Session, SessionGateway
from sfdc_tool.transport.base import CallResult

from tests.conftest import FakeTransport, METADATA_URL, SERVER_URL, login_result, session_fault


# ============================================================================
# Login and endpoints
# ============================================================================

class TestLogin:

    def test_login_is_lazy(self, gateway, transport):
        assert transport.calls == []
        assert gateway.session.session_id == "SESSION-1"
        assert gateway.session.session_id == "SESSION-1"
        assert transport.logins == 1

    def test_login_call(self, gateway, transport):
        gateway.login()
        call = transport.calls_to("login")[0]
        assert call["endpoint"] == "https://test.salesforce.com/services/Soap/u/33.0"
        assert call["namespace"] == PARTNER_NAMESPACE
        assert call["parameters"] == [
            ("username", "admin@example.com.dev"),
            ("password", "secret+token"),
        ]

    def test_login_fault(self, credentials):
        transport = FakeTransport({"login": [CallResult.fault("INVALID_LOGIN: bad password")]})
        gateway = SessionGateway(credentials, transport)
        with pytest.raises(LoginError, match="INVALID_LOGIN"):
            gateway.login()

    def test_is_sandbox(self, gateway):
        assert gateway.is_sandbox() is True

    def test_endpoints(self):
        session = Session.from_login_result(login_result())
        assert session.endpoint_for(ApiEndpoint.METADATA) == METADATA_URL
        assert session.endpoint_for(ApiEndpoint.PARTNER) == SERVER_URL
        assert session.endpoint_for(ApiEndpoint.APEX) == SERVER_URL.replace("/u/", "/s/")
        assert session.endpoint_for(ApiEndpoint.TOOLING) == SERVER_URL.replace("/u/", "/T/")

    def test_invoke_attaches_session(self, gateway, transport):
        transport.script("describeMetadata", CallResult.ok({"organizationNamespace": None}))
        gateway.invoke("describeMetadata", [("asOfVersion", "33.0")])

        call = transport.calls_to("describeMetadata")[0]
        assert call["endpoint"] == METADATA_URL
        assert call["namespace"] == METADATA_NAMESPACE
        assert call["headers"] == {"SessionHeader": {"sessionId": "SESSION-1"}}

    def test_invoke_merges_extra_headers(self, gateway, transport):
        transport.script("executeAnonymous", CallResult.ok({}))
        gateway.invoke(
            "executeAnonymous",
            api=ApiEndpoint.APEX,
            headers={"DebuggingHeader": {"debugLevel": "DEBUGONLY"}},
        )
        call = transport.calls_to("executeAnonymous")[0]
        assert call["namespace"] == APEX_NAMESPACE
        assert call["headers"]["SessionHeader"] == {"sessionId": "SESSION-1"}
        assert call["headers"]["DebuggingHeader"] == {"debugLevel": "DEBUGONLY"}


# ============================================================================
# Single-retry policy
# ============================================================================

class TestRetryPolicy:

    def test_classify(self, gateway):
        assert gateway.classify(CallResult.ok("x")) is CallOutcome.OK
        assert gateway.classify(session_fault()) is CallOutcome.RETRYABLE_AUTH_FAULT
        assert gateway.classify(CallResult.fault("INVALID_TYPE: nope")) is CallOutcome.FATAL

    def test_session_fault_retries_once(self, gateway, transport):
        transport.script("retrieve", session_fault(), CallResult.ok({"id": "09S1"}))

        result = gateway.invoke("retrieve", [("retrieveRequest", {})])

        assert result.result == {"id": "09S1"}
        assert transport.operations() == ["login", "retrieve", "login", "retrieve"]
        retried = transport.calls_to("retrieve")[1]
        assert retried["headers"]["SessionHeader"]["sessionId"] == "SESSION-2"
        assert gateway.session.session_id == "SESSION-2"

    def test_other_fault_is_not_retried(self, gateway, transport):
        transport.script("retrieve", CallResult.fault("INVALID_TYPE: nope", "sf:INVALID_TYPE"))

        with pytest.raises(OperationFault) as exc_info:
            gateway.invoke("retrieve")

        assert transport.operations() == ["login", "retrieve"]
        assert exc_info.value.operation == "retrieve"
        assert "INVALID_TYPE: nope" in str(exc_info.value)
        assert str(exc_info.value).startswith("retrieve Failed")

    def test_retry_still_invalid(self, gateway, transport):
        transport.script("retrieve", session_fault(), session_fault())

        with pytest.raises(SessionExpiredRetryExhausted):
            gateway.invoke("retrieve")

        assert transport.operations() == ["login", "retrieve", "login", "retrieve"]

    def test_retry_fails_otherwise(self, gateway, transport):
        transport.script("retrieve", session_fault(), CallResult.fault("UNKNOWN_EXCEPTION"))

        with pytest.raises(OperationFault) as exc_info:
            gateway.invoke("retrieve")

        assert not isinstance(exc_info.value, SessionExpiredRetryExhausted)
        assert transport.logins == 2

    def test_configurable_fault_codes(self, credentials):
        transport = FakeTransport({
            "query": [CallResult.fault("Session timed out", "TOKEN_EXPIRED"), CallResult.ok({})],
        })
        gateway = SessionGateway(credentials, transport, session_fault_codes=["TOKEN_EXPIRED"])
        gateway.invoke("query", api=ApiEndpoint.PARTNER)
        assert transport.logins == 2

    def test_renew_reuses_token_refreshed_elsewhere(self, gateway, transport):
        stale = gateway.session
        fresh = gateway.login()
        assert gateway._renew(stale) is fresh
        assert transport.logins == 2

    def test_concurrent_renewals_log_in_once(self, gateway, transport):
        stale = gateway.session
        barrier = threading.Barrier(4)
        results = []

        def renew():
            barrier.wait()
            results.append(gateway._renew(stale))

        threads = [threading.Thread(target=renew) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert transport.logins == 2
        assert {session.session_id for session in results} == {"SESSION-2"}
