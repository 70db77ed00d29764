"""Retrieve orchestration: manifest in, base64 archive out"""

import logging
from typing import Any, Callable, Dict, Mapping, Iterable, Optional, Union

from ..api.exceptions import ManifestError
from ..constants import DEFAULT_API_VERSION, JobKind
from ..core.async_poller import AsyncJobPoller, CancellationToken, JobStatus, RETRIEVE_VOCABULARY
from ..core.session import ApiEndpoint, SessionGateway
from ..models.config import PollingConfig
from ..models.job import AsyncJob
from ..models.manifest import Manifest

logger = logging.getLogger(__name__)


class RetrievalOrchestrator:
    """Submits a retrieve request for a manifest and waits for the archive"""

    def __init__(self,
                 gateway: SessionGateway,
                 polling: Optional[PollingConfig] = None,
                 api_version: str = DEFAULT_API_VERSION,
                 sleep: Optional[Callable[[float], Any]] = None):
        """Initialize retrieval orchestrator

        Args:
            gateway: Session gateway used for every call
            polling: Polling configuration
            api_version: API version sent with the retrieve request
            sleep: Sleep function override (for testing)
        """
        self.gateway = gateway
        self.polling = polling or PollingConfig()
        self.api_version = str(api_version)
        self._sleep = sleep

    def build_request(self,
                      manifest: Union[Manifest, Mapping[str, Iterable[str]]]) -> Dict[str, Any]:
        """Translate a manifest into the nested retrieve request structure

        Raises:
            ManifestError: If the manifest is empty
        """
        members = manifest.snapshot() if isinstance(manifest, Manifest) else {
            type_name: sorted(set(names)) for type_name, names in manifest.items()
        }
        if not any(members.values()):
            raise ManifestError("This method must be called with a non-empty manifest")

        return {
            "apiVersion": self.api_version,
            "unpackaged": {
                "types": [
                    {"members": members[type_name], "name": type_name}
                    for type_name in sorted(members)
                ],
            },
        }

    def start(self, manifest: Union[Manifest, Mapping[str, Iterable[str]]]) -> AsyncJob:
        """Submit a retrieve request and return the job"""
        logger.info("Starting retrieval")
        request = self.build_request(manifest)

        result = self.gateway.invoke(
            "retrieve",
            [("retrieveRequest", request)],
            api=ApiEndpoint.METADATA,
        )
        return AsyncJob(
            id=result.result["id"],
            kind=JobKind.RETRIEVE,
            state=result.result.get("state"),
        )

    def check_status(self, job_id: str) -> JobStatus:
        """Ask the server for the retrieve job's status"""
        result = self.gateway.invoke(
            "checkRetrieveStatus",
            [("asyncProcessId", job_id)],
            api=ApiEndpoint.METADATA,
        ).result or {}

        return JobStatus(
            job_id=job_id,
            status=result.get("status"),
            payload=result.get("zipFile"),
            message=result.get("errorMessage") or result.get("message"),
            details={
                key: value for key, value in result.items()
                if key not in ("zipFile", "status")
            },
        )

    def _poller(self) -> AsyncJobPoller:
        return AsyncJobPoller(
            RETRIEVE_VOCABULARY,
            poll_interval=self.polling.interval,
            max_attempts=self.polling.max_attempts,
            max_duration=self.polling.max_duration,
            sleep=self._sleep,
            operation="Retrieve",
        )

    def wait(self, job: AsyncJob, cancel_token: Optional[CancellationToken] = None) -> str:
        """Poll a submitted retrieve job and return the base64 archive"""
        status = self._poller().wait(job.id, self.check_status, cancel_token)
        return status.payload

    def retrieve(self,
                 manifest: Union[Manifest, Mapping[str, Iterable[str]]],
                 cancel_token: Optional[CancellationToken] = None) -> str:
        """Retrieve the metadata described by a manifest

        Args:
            manifest: Manifest, or mapping such as
                ``{"ApexClass": ["MyApexClass"], "Profile": ["*"]}``
            cancel_token: Optional cancellation token

        Returns:
            Base64-encoded zip archive, left encoded
        """
        status = self._poller().run(
            lambda: self.start(manifest).id,
            self.check_status,
            cancel_token,
        )
        return status.payload
