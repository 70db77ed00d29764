"""Core functionality for sfdc-tool"""

from .type_registry import ArtifactType, TypeRegistry, DEFAULT_REGISTRY
from .path_translator import ArtifactDescriptor, PathTranslator
from .manifest_engine import ManifestEngine
from .async_poller import (
    AsyncJobPoller,
    CancellationToken,
    JobStatus,
    StatusVocabulary,
    RETRIEVE_VOCABULARY,
    DEPLOY_VOCABULARY,
)
from .session import ApiEndpoint, CallOutcome, Session, SessionGateway

__all__ = [
    "ArtifactType",
    "TypeRegistry",
    "DEFAULT_REGISTRY",
    "ArtifactDescriptor",
    "PathTranslator",
    "ManifestEngine",
    "AsyncJobPoller",
    "CancellationToken",
    "JobStatus",
    "StatusVocabulary",
    "RETRIEVE_VOCABULARY",
    "DEPLOY_VOCABULARY",
    "ApiEndpoint",
    "CallOutcome",
    "Session",
    "SessionGateway",
]
