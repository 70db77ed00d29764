"""Session ownership and the single-retry invocation policy"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from ..api.exceptions import LoginError, OperationFault, SessionExpiredRetryExhausted
from ..constants import (
    APEX_NAMESPACE,
    DEFAULT_SESSION_FAULT_CODES,
    LOGIN_PATH,
    METADATA_NAMESPACE,
    PARTNER_NAMESPACE,
    TOOLING_NAMESPACE,
)
from ..models.config import Credentials
from ..transport.base import CallResult, Parameters, Transport

logger = logging.getLogger(__name__)


class ApiEndpoint(Enum):
    """Remote APIs reachable with one session"""
    PARTNER = "partner"
    METADATA = "metadata"
    APEX = "apex"
    TOOLING = "tooling"

    @property
    def namespace(self) -> str:
        return {
            ApiEndpoint.PARTNER: PARTNER_NAMESPACE,
            ApiEndpoint.METADATA: METADATA_NAMESPACE,
            ApiEndpoint.APEX: APEX_NAMESPACE,
            ApiEndpoint.TOOLING: TOOLING_NAMESPACE,
        }[self]


class CallOutcome(Enum):
    """Classification of a single remote call"""
    OK = "ok"
    RETRYABLE_AUTH_FAULT = "retryable_auth_fault"
    FATAL = "fatal"


@dataclass(frozen=True)
class Session:
    """Authenticated session returned by login"""
    session_id: str
    server_url: str
    metadata_server_url: str
    sandbox: bool = False
    user_id: Optional[str] = None
    generation: int = 0

    def endpoint_for(self, api: ApiEndpoint) -> str:
        """Service URL for the given API"""
        if api is ApiEndpoint.METADATA:
            return self.metadata_server_url
        if api is ApiEndpoint.APEX:
            return self.server_url.replace("/u/", "/s/")
        if api is ApiEndpoint.TOOLING:
            return self.server_url.replace("/u/", "/T/")
        return self.server_url

    @classmethod
    def from_login_result(cls, result: Dict[str, Any], generation: int = 0) -> 'Session':
        """Create from the login operation's result"""
        return cls(
            session_id=result["sessionId"],
            server_url=result["serverUrl"],
            metadata_server_url=result.get("metadataServerUrl") or result["serverUrl"],
            sandbox=str(result.get("sandbox", "false")).lower() == "true",
            user_id=result.get("userId"),
            generation=generation,
        )


class SessionGateway:
    """Owns the session token and performs remote calls with it

    An invalid-session fault triggers exactly one re-authentication and
    one retry of the same call. Everything else is surfaced to the caller.
    """

    def __init__(self,
                 credentials: Credentials,
                 transport: Transport,
                 session_fault_codes: Optional[Iterable[str]] = None):
        """Initialize session gateway

        Args:
            credentials: Login credentials
            transport: Transport used for every remote call
            session_fault_codes: Substrings of a fault code or fault string
                that mark the session as invalid
        """
        self.credentials = credentials
        self.transport = transport
        self.session_fault_codes = list(session_fault_codes or DEFAULT_SESSION_FAULT_CODES)
        self._session: Optional[Session] = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def login_url(self) -> str:
        return self.credentials.url + LOGIN_PATH.format(api_version=self.credentials.api_version)

    def _login(self) -> Session:
        logger.info("Logging in as %s", self.credentials.username)

        result = self.transport.call(
            self.login_url,
            PARTNER_NAMESPACE,
            "login",
            None,
            [
                ("username", self.credentials.username),
                ("password", self.credentials.password),
            ],
        )
        if result.is_fault:
            raise LoginError(result.fault_string or "", result.fault_code)

        self._generation += 1
        return Session.from_login_result(result.result, self._generation)

    @property
    def session(self) -> Session:
        """Current session, logging in on first use"""
        with self._lock:
            if self._session is None:
                self._session = self._login()
            return self._session

    def login(self) -> Session:
        """Force a fresh login and replace the stored session"""
        with self._lock:
            self._session = self._login()
            return self._session

    def _renew(self, stale: Session) -> Session:
        with self._lock:
            # Another thread may already have replaced the stale token
            if self._session is None or self._session.generation == stale.generation:
                logger.info("Session expired, logging in again")
                self._session = self._login()
            return self._session

    def is_sandbox(self) -> bool:
        """Check if the org behind this session is a sandbox"""
        return self.session.sandbox

    def classify(self, result: CallResult) -> CallOutcome:
        """Sort a call result into ok, retryable auth fault or fatal"""
        if not result.is_fault:
            return CallOutcome.OK

        text = f"{result.fault_code or ''} {result.fault_string or ''}"
        if any(code in text for code in self.session_fault_codes):
            return CallOutcome.RETRYABLE_AUTH_FAULT
        return CallOutcome.FATAL

    def _do_call(self,
                 session: Session,
                 api: ApiEndpoint,
                 operation: str,
                 parameters: Parameters,
                 headers: Optional[Dict[str, Any]]) -> CallResult:
        all_headers = {"SessionHeader": {"sessionId": session.session_id}}
        if headers:
            all_headers.update(headers)

        return self.transport.call(
            session.endpoint_for(api),
            api.namespace,
            operation,
            all_headers,
            parameters,
        )

    def invoke(self,
               operation: str,
               parameters: Parameters = (),
               api: ApiEndpoint = ApiEndpoint.METADATA,
               headers: Optional[Dict[str, Any]] = None) -> CallResult:
        """Perform a remote call with the current session attached

        Args:
            operation: Operation name
            parameters: Ordered operation parameters
            api: Which API endpoint and namespace to call
            headers: Extra header blocks besides the session header

        Returns:
            The successful call result

        Raises:
            OperationFault: If the call faults for any reason other than
                an invalid session, or the retry faults
            SessionExpiredRetryExhausted: If the retry still reports an
                invalid session
            LoginError: If re-authentication fails
        """
        session = self.session
        result = self._do_call(session, api, operation, parameters, headers)
        outcome = self.classify(result)

        if outcome is CallOutcome.RETRYABLE_AUTH_FAULT:
            logger.debug("%s reported an invalid session: %s", operation, result.fault_string)
            session = self._renew(session)
            result = self._do_call(session, api, operation, parameters, headers)
            outcome = self.classify(result)

            if outcome is CallOutcome.RETRYABLE_AUTH_FAULT:
                raise SessionExpiredRetryExhausted(
                    operation, result.fault_string or "", result.fault_code
                )

        if outcome is CallOutcome.FATAL:
            raise OperationFault(operation, result.fault_string or "", result.fault_code)

        return result
