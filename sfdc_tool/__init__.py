"""sfdc-tool - A metadata and data client for Salesforce orgs.

Build package.xml manifests from source trees, retrieve and deploy
metadata, and run queries and anonymous Apex against an org.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Core API
from .api.client import SFDCClient, retrieve, deploy

# Data models
from .models.config import ClientConfig, Credentials, PollingConfig
from .models.job import AsyncJob
from .models.manifest import Manifest

# Core components
from .core.type_registry import ArtifactType, TypeRegistry
from .core.path_translator import ArtifactDescriptor, PathTranslator
from .core.async_poller import CancellationToken

# Exceptions
from .api.exceptions import (
    SFDCToolError,
    PathError,
    MalformedPathError,
    MissingNameError,
    UnknownArtifactTypeError,
    ManifestError,
    OperationFault,
    SessionExpiredRetryExhausted,
    LoginError,
    UnexpectedStatusError,
    PollTimeoutError,
    OperationCancelledError,
    ConfigError,
)

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "SFDCClient",

    # Core API functions
    "retrieve",
    "deploy",

    # Data models
    "ClientConfig",
    "Credentials",
    "PollingConfig",
    "AsyncJob",
    "Manifest",

    # Core components
    "ArtifactType",
    "TypeRegistry",
    "ArtifactDescriptor",
    "PathTranslator",
    "CancellationToken",

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
    "UnexpectedStatusError",
    "PollTimeoutError",
    "OperationCancelledError",
    "ConfigError",
]
