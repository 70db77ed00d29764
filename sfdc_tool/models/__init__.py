# sfdc_tool/models/__init__.py
"""Data models for sfdc-tool"""

from .config import ClientConfig, Credentials, PollingConfig
from .job import AsyncJob
from .manifest import Manifest

__all__ = [
    # Config models
    "ClientConfig",
    "Credentials",
    "PollingConfig",

    # Job models
    "AsyncJob",

    # Manifest models
    "Manifest",
]
