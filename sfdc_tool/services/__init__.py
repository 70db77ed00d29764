# sfdc_tool/services/__init__.py
"""Business logic services for sfdc-tool"""

from .config_service import ConfigService
from .retrieve_service import RetrievalOrchestrator
from .deploy_service import DeploymentOrchestrator
from .metadata_service import MetadataService
from .partner_service import PartnerService
from .apex_service import ApexService
from .tooling_service import ToolingService

__all__ = [
    "ConfigService",
    "RetrievalOrchestrator",
    "DeploymentOrchestrator",
    "MetadataService",
    "PartnerService",
    "ApexService",
    "ToolingService",
]
