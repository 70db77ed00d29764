"""Tooling API operations"""

import logging
from typing import Any, Dict

from .apex_service import check_anonymous_result
from ..core.session import ApiEndpoint, SessionGateway

logger = logging.getLogger(__name__)


class ToolingService:
    """Calls against the tooling endpoint"""

    def __init__(self, gateway: SessionGateway):
        self.gateway = gateway

    def execute_anonymous(self, code: str) -> Dict[str, Any]:
        """Execute anonymous Apex through the tooling API

        Unlike the Apex API variant, no debug log can be requested.

        Raises:
            ApexExecutionError: If the code fails to compile or to complete
        """
        logger.info("Executing anonymous Apex via the tooling API")
        call = self.gateway.invoke(
            "executeAnonymous",
            [("string", code)],
            api=ApiEndpoint.TOOLING,
        )
        return check_anonymous_result(call.result or {})
