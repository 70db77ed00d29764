"""Apex API operations"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..api.exceptions import ApexExecutionError
from ..core.session import ApiEndpoint, SessionGateway

logger = logging.getLogger(__name__)


def _is_false(value: Any) -> bool:
    return str(value).lower() == "false"


def check_anonymous_result(result: Dict[str, Any]) -> Dict[str, Any]:
    """Raise unless an executeAnonymous result compiled and completed

    Raises:
        ApexExecutionError: If the code failed to compile or to complete
    """
    if _is_false(result.get("compiled")):
        raise ApexExecutionError(
            f"ExecuteAnonymous failed to compile: {result.get('compileProblem')}", result
        )
    if _is_false(result.get("success")):
        raise ApexExecutionError(
            f"ExecuteAnonymous failed to complete: {result.get('exceptionMessage')}", result
        )
    return result


class ApexService:
    """Executes anonymous Apex, compiles code and runs tests"""

    def __init__(self, gateway: SessionGateway):
        self.gateway = gateway

    def _call(self, operation: str, parameters, headers=None):
        return self.gateway.invoke(operation, parameters, api=ApiEndpoint.APEX, headers=headers)

    def execute_anonymous(self,
                          code: str,
                          debug: bool = False) -> Tuple[Dict[str, Any], Optional[str]]:
        """Execute a block of anonymous Apex

        Args:
            code: Apex source
            debug: Request a debug log back from the server

        Returns:
            (result, debug_log); debug_log is None unless requested

        Raises:
            ApexExecutionError: If the code fails to compile or to complete
        """
        headers = None
        if debug:
            headers = {"DebuggingHeader": {"debugLevel": "DEBUGONLY"}}

        call = self._call("executeAnonymous", [("String", code)], headers=headers)
        result = check_anonymous_result(call.result or {})

        debug_log = None
        debugging_info = call.headers.get("DebuggingInfo")
        if isinstance(debugging_info, dict):
            debug_log = debugging_info.get("debugLog")

        return result, debug_log

    def compile_and_test(self, classes: List[str]) -> Dict[str, Any]:
        """Compile class bodies and run their tests in one call"""
        logger.info("Compiling and testing %d class(es)", len(classes))
        return self._call(
            "compileAndTest",
            [("CompileAndTestRequest", {"classes": list(classes)})],
        ).result or {}

    def compile_classes(self, scripts: List[str]) -> List[Dict[str, Any]]:
        """Compile class bodies; one compile result per script"""
        logger.info("Compiling %d class(es)", len(scripts))
        return self._call(
            "compileClasses", [("scripts", script) for script in scripts]
        ).results()

    def compile_triggers(self, scripts: List[str]) -> List[Dict[str, Any]]:
        """Compile trigger bodies; one compile result per script"""
        logger.info("Compiling %d trigger(s)", len(scripts))
        return self._call(
            "compileTriggers", [("scripts", script) for script in scripts]
        ).results()

    def run_tests(self, classes: List[str]) -> Dict[str, Any]:
        """Run the named test classes synchronously"""
        logger.info("Running tests: %s", ", ".join(classes))
        return self._call(
            "runTests",
            [("RunTestsRequest", {"classes": list(classes)})],
        ).result or {}
