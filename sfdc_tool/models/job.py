"""Asynchronous job models"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..constants import JobKind


@dataclass
class AsyncJob:
    """Server-side retrieve or deploy job"""

    id: str
    kind: JobKind
    state: Optional[str] = None  # State reported at submission, if any
    submitted_at: datetime = field(default_factory=datetime.now)

