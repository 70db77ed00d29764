"""Exception definitions for sfdc-tool API"""

from typing import Any, Dict, Optional

from ..constants import ErrorCode


class SFDCToolError(Exception):
    """Base exception for sfdc-tool"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class PathError(SFDCToolError):
    """Disk path could not be translated into an artifact"""

    def __init__(self, message: str, path: str, error_code: str = None):
        super().__init__(message, error_code)
        self.path = path


class MalformedPathError(PathError):
    """Path has no leading type segment"""

    def __init__(self, path: str):
        super().__init__(f"Line {path!r} doesn't have a type.", path, ErrorCode.MALFORMED_PATH)


class MissingNameError(PathError):
    """No artifact name could be extracted from the path"""

    def __init__(self, path: str):
        super().__init__(f"Line {path!r} doesn't have a name.", path, ErrorCode.MISSING_NAME)


class UnknownArtifactTypeError(SFDCToolError):
    """Artifact type is not present in the type registry"""

    def __init__(self, type_name: str):
        super().__init__(f"Unknown artifact type: {type_name}", ErrorCode.UNKNOWN_ARTIFACT_TYPE)
        self.type_name = type_name


class ManifestError(SFDCToolError):
    """Manifest file could not be read"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.MANIFEST_INVALID)


class OperationFault(SFDCToolError):
    """Remote operation returned a fault"""

    def __init__(self,
                 operation: str,
                 fault_string: str,
                 fault_code: Optional[str] = None,
                 error_code: str = ErrorCode.OPERATION_FAULT):
        super().__init__(f"{operation} Failed: {fault_string}", error_code)
        self.operation = operation
        self.fault_string = fault_string
        self.fault_code = fault_code


class SessionExpiredRetryExhausted(OperationFault):
    """Call still reported an invalid session after re-authentication"""

    def __init__(self, operation: str, fault_string: str, fault_code: Optional[str] = None):
        super().__init__(operation, fault_string, fault_code, ErrorCode.SESSION_RETRY_EXHAUSTED)


class LoginError(OperationFault):
    """The login operation itself failed"""

    def __init__(self, fault_string: str, fault_code: Optional[str] = None):
        super().__init__("login", fault_string, fault_code, ErrorCode.LOGIN_FAILED)


class JobError(SFDCToolError):
    """Asynchronous job did not reach a successful terminal status"""

    def __init__(self, message: str, job_id: Optional[str], error_code: str = None):
        super().__init__(message, error_code)
        self.job_id = job_id


class UnexpectedStatusError(JobError):
    """Job reported a status outside the known vocabulary"""

    def __init__(self,
                 job_id: Optional[str],
                 status: Optional[str],
                 message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None,
                 operation: str = "job"):
        text = f"Check {operation} had an unexpected result for {job_id}: status={status!r}"
        if message:
            text += f": {message}"
        super().__init__(text, job_id, ErrorCode.UNEXPECTED_STATUS)
        self.status = status
        self.detail_message = message
        self.details = details or {}


class PollTimeoutError(JobError):
    """Polling exceeded the configured attempts or duration"""

    def __init__(self, job_id: Optional[str], attempts: int, elapsed: float):
        super().__init__(
            f"Gave up on job {job_id} after {attempts} status check(s) in {elapsed:.1f}s",
            job_id,
            ErrorCode.POLL_TIMEOUT
        )
        self.attempts = attempts
        self.elapsed = elapsed


class OperationCancelledError(JobError):
    """Polling was cancelled by the caller"""

    def __init__(self, job_id: Optional[str]):
        super().__init__(f"Polling of job {job_id} was cancelled", job_id, ErrorCode.OPERATION_CANCELLED)


class ApexExecutionError(SFDCToolError):
    """Anonymous Apex failed to compile or complete"""

    def __init__(self, message: str, result: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.APEX_EXECUTION_FAILED)
        self.result = result or {}


class ConfigError(SFDCToolError):
    """Configuration error"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class ArchiveError(SFDCToolError):
    """Archive could not be built or extracted"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.ARCHIVE_ERROR)


class TransportError(SFDCToolError):
    """The transport could not complete the HTTP exchange"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.TRANSPORT_ERROR)
