# sfdc_tool/api/__init__.py
"""API layer for sfdc-tool"""

from .client import SFDCClient, retrieve, deploy
from .exceptions import (
    SFDCToolError,
    PathError,
    MalformedPathError,
    MissingNameError,
    UnknownArtifactTypeError,
    ManifestError,
    OperationFault,
    SessionExpiredRetryExhausted,
    LoginError,
    JobError,
    UnexpectedStatusError,
    PollTimeoutError,
    OperationCancelledError,
    ApexExecutionError,
    ConfigError,
    ArchiveError,
    TransportError,
)

__all__ = [
    # Main classes
    "SFDCClient",

    # Convenience functions
    "retrieve",
    "deploy",

    # Exceptions
    "SFDCToolError",
    "PathError",
    "MalformedPathError",
    "MissingNameError",
    "UnknownArtifactTypeError",
    "ManifestError",
    "OperationFault",
    "SessionExpiredRetryExhausted",
    "LoginError",
    "JobError",
    "UnexpectedStatusError",
    "PollTimeoutError",
    "OperationCancelledError",
    "ApexExecutionError",
    "ConfigError",
    "ArchiveError",
    "TransportError",
]
