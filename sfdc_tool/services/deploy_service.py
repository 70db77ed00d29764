"""Deploy orchestration: base64 archive in, deployment id out"""

import logging
from typing import Any, Callable, Dict, List, Optional

from ..constants import JobKind
from ..core.async_poller import AsyncJobPoller, CancellationToken, JobStatus, DEPLOY_VOCABULARY
from ..core.session import ApiEndpoint, SessionGateway
from ..models.config import PollingConfig
from ..models.job import AsyncJob

logger = logging.getLogger(__name__)


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def describe_failure(result: Dict[str, Any]) -> Optional[str]:
    """Summarize why a deployment did not succeed

    Combines the error message, state detail and any component or
    test failures reported in the deploy details.
    """
    lines = []
    for key in ("errorMessage", "stateDetail"):
        if result.get(key):
            lines.append(str(result[key]))

    details = result.get("details") or {}
    if isinstance(details, dict):
        for failure in _as_list(details.get("componentFailures")):
            if isinstance(failure, dict):
                lines.append(
                    f"{failure.get('fileName', '?')}: {failure.get('problem', '')}".strip()
                )

        run_tests = details.get("runTestResult") or {}
        if isinstance(run_tests, dict):
            for failure in _as_list(run_tests.get("failures")):
                if isinstance(failure, dict):
                    lines.append(
                        f"{failure.get('name', '?')}.{failure.get('methodName', '?')}: "
                        f"{failure.get('message', '')}"
                    )

    return "\n".join(lines) or None


class DeploymentOrchestrator:
    """Submits a deploy and waits for it to finish"""

    def __init__(self,
                 gateway: SessionGateway,
                 polling: Optional[PollingConfig] = None,
                 sleep: Optional[Callable[[float], Any]] = None):
        """Initialize deployment orchestrator

        Args:
            gateway: Session gateway used for every call
            polling: Polling configuration
            sleep: Sleep function override (for testing)
        """
        self.gateway = gateway
        self.polling = polling or PollingConfig()
        self._sleep = sleep

    def start(self, zip_file: str, deploy_options: Optional[Dict[str, Any]] = None) -> AsyncJob:
        """Submit a base64 archive for deployment

        Args:
            zip_file: Base64-encoded zip archive
            deploy_options: Passed verbatim as the DeployOptions element

        Returns:
            The submitted job with its initial state
        """
        parameters = [("ZipFile", zip_file)]
        if deploy_options:
            parameters.append(("DeployOptions", deploy_options))

        result = self.gateway.invoke("deploy", parameters, api=ApiEndpoint.METADATA).result
        job = AsyncJob(id=result["id"], kind=JobKind.DEPLOY, state=result.get("state"))
        logger.info("Deployment status:\t%s", job.state)
        return job

    def check_status(self, job_id: str) -> JobStatus:
        """Ask the server for the deploy job's status"""
        result = self.gateway.invoke(
            "checkDeployStatus",
            [("asyncProcessId", job_id), ("includeDetails", True)],
            api=ApiEndpoint.METADATA,
        ).result or {}

        return JobStatus(
            job_id=job_id,
            status=result.get("status"),
            payload=result.get("id", job_id),
            message=describe_failure(result),
            details=result,
        )

    def _poller(self) -> AsyncJobPoller:
        return AsyncJobPoller(
            DEPLOY_VOCABULARY,
            poll_interval=self.polling.interval,
            max_attempts=self.polling.max_attempts,
            max_duration=self.polling.max_duration,
            sleep=self._sleep,
            operation="Deploy",
        )

    def wait(self, job: AsyncJob, cancel_token: Optional[CancellationToken] = None) -> JobStatus:
        """Poll a submitted deploy job until it succeeds"""
        return self._poller().wait(job.id, self.check_status, cancel_token)

    def deploy(self,
               zip_file: str,
               deploy_options: Optional[Dict[str, Any]] = None,
               cancel_token: Optional[CancellationToken] = None) -> str:
        """Deploy an archive and wait for completion

        Args:
            zip_file: Base64-encoded zip archive
            deploy_options: Passed verbatim, e.g. ``{"checkOnly": True}``
            cancel_token: Optional cancellation token

        Returns:
            The deployment id, usable with deploy_recent_validation

        Raises:
            UnexpectedStatusError: If the deployment fails
        """
        status = self._poller().run(
            lambda: self.start(zip_file, deploy_options).id,
            self.check_status,
            cancel_token,
        )
        return status.job_id

    def deploy_recent_validation(self, validation_id: str) -> str:
        """Promote a successfully validated (check-only) deployment

        Returns:
            Id of the new deployment
        """
        validation_id = validation_id.strip()
        logger.info("Deploying recent validation %s", validation_id)

        result = self.gateway.invoke(
            "deployRecentValidation",
            [("validationId", validation_id)],
            api=ApiEndpoint.METADATA,
        )
        return result.result
