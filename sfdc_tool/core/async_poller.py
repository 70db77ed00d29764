"""Submit-then-poll driver for long-running server jobs"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, FrozenSet, Optional

from ..api.exceptions import OperationCancelledError, PollTimeoutError, UnexpectedStatusError
from ..constants import (
    DEFAULT_POLL_INTERVAL,
    DEPLOY_IN_PROGRESS_STATUSES,
    DEPLOY_SUCCESS_STATUS,
    RETRIEVE_IN_PROGRESS_STATUSES,
    RETRIEVE_SUCCESS_STATUS,
    JobKind,
)

logger = logging.getLogger(__name__)


@dataclass
class JobStatus:
    """One status report for an asynchronous job"""
    job_id: str
    status: Optional[str]
    payload: Any = None
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class StatusVocabulary:
    """Status values an operation may report"""
    in_progress: FrozenSet[str]
    success: str

    def is_in_progress(self, status: Optional[str]) -> bool:
        return status in self.in_progress

    def is_success(self, status: Optional[str]) -> bool:
        return status == self.success


RETRIEVE_VOCABULARY = StatusVocabulary(RETRIEVE_IN_PROGRESS_STATUSES, RETRIEVE_SUCCESS_STATUS)
DEPLOY_VOCABULARY = StatusVocabulary(DEPLOY_IN_PROGRESS_STATUSES, DEPLOY_SUCCESS_STATUS)

VOCABULARIES = {
    JobKind.RETRIEVE: RETRIEVE_VOCABULARY,
    JobKind.DEPLOY: DEPLOY_VOCABULARY,
}


class CancellationToken:
    """Thread-safe flag checked by the poller at every tick"""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Sleep up to ``timeout`` seconds, waking early on cancel"""
        return self._event.wait(timeout)


class AsyncJobPoller:
    """Drives a job from submission to a terminal status

    ``start`` is called once; then the poller sleeps and checks status
    until the status leaves the in-progress vocabulary. At least one
    status check always happens after submission.
    """

    def __init__(self,
                 vocabulary: StatusVocabulary,
                 poll_interval: float = DEFAULT_POLL_INTERVAL,
                 max_attempts: Optional[int] = None,
                 max_duration: Optional[float] = None,
                 sleep: Optional[Callable[[float], Any]] = None,
                 clock: Callable[[], float] = time.monotonic,
                 operation: str = "job"):
        """Initialize poller

        Args:
            vocabulary: In-progress and success statuses for the operation
            poll_interval: Seconds to sleep before each status check
            max_attempts: Give up after this many status checks
            max_duration: Give up after this many seconds
            sleep: Sleep function; defaults to the cancellation token's
                wait, or time.sleep when there is no token
            clock: Monotonic clock used for max_duration
            operation: Operation label used in logs and errors
        """
        self.vocabulary = vocabulary
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.max_duration = max_duration
        self._sleep = sleep
        self._clock = clock
        self.operation = operation

    def run(self,
            start: Callable[[], str],
            check_status: Callable[[str], JobStatus],
            cancel_token: Optional[CancellationToken] = None) -> JobStatus:
        """Submit a job and wait for it to finish

        Args:
            start: Submits the job and returns its id
            check_status: Reports the job's current status
            cancel_token: Optional token honoured before every status check

        Returns:
            The terminal, successful status report

        Raises:
            UnexpectedStatusError: If a status outside the vocabulary is seen
            PollTimeoutError: If max_attempts or max_duration is exceeded
            OperationCancelledError: If the token is cancelled
        """
        job_id = start()
        logger.info("%s job submitted: %s", self.operation, job_id)
        return self.wait(job_id, check_status, cancel_token)

    def wait(self,
             job_id: str,
             check_status: Callable[[str], JobStatus],
             cancel_token: Optional[CancellationToken] = None) -> JobStatus:
        """Poll an already-submitted job until it finishes"""
        sleeper = self._sleep
        if sleeper is None:
            sleeper = cancel_token.wait if cancel_token else time.sleep

        started = self._clock()
        attempts = 0

        while True:
            if cancel_token and cancel_token.is_cancelled:
                raise OperationCancelledError(job_id)

            sleeper(self.poll_interval)

            if cancel_token and cancel_token.is_cancelled:
                raise OperationCancelledError(job_id)

            status = check_status(job_id)
            attempts += 1
            logger.info("%s status: %s", self.operation, status.status)

            if self.vocabulary.is_success(status.status):
                return status

            if not self.vocabulary.is_in_progress(status.status):
                raise UnexpectedStatusError(
                    job_id,
                    status.status,
                    status.message,
                    status.details,
                    operation=self.operation,
                )

            if self.max_attempts is not None and attempts >= self.max_attempts:
                raise PollTimeoutError(job_id, attempts, self._clock() - started)

            elapsed = self._clock() - started
            if self.max_duration is not None and elapsed >= self.max_duration:
                raise PollTimeoutError(job_id, attempts, elapsed)
