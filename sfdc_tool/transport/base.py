# sfdc_tool/transport/base.py
"""Transport abstract base class"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

# Ordered (name, value) pairs; order is significant on the wire
Parameters = Sequence[Tuple[str, Any]]


@dataclass
class CallResult:
    """Structured outcome of one remote operation

    Exactly one of ``result`` or ``fault_string`` is meaningful:
    a fault is signalled by ``fault_string`` being set.
    """
    result: Any = None
    fault_code: Optional[str] = None
    fault_string: Optional[str] = None
    headers: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_fault(self) -> bool:
        """Check if the call returned a fault"""
        return self.fault_string is not None or self.fault_code is not None

    @classmethod
    def ok(cls, result: Any = None, headers: Optional[Dict[str, Any]] = None) -> 'CallResult':
        return cls(result=result, headers=headers or {})

    @classmethod
    def fault(cls, fault_string: str, fault_code: Optional[str] = None) -> 'CallResult':
        return cls(fault_code=fault_code, fault_string=fault_string)

    def results(self) -> List[Any]:
        """The result as a list, whether the server sent zero, one or many"""
        if self.result is None:
            return []
        if isinstance(self.result, list):
            return self.result
        return [self.result]


class Transport(ABC):
    """Abstract base class for remote call transports"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize transport

        Args:
            config: Transport-specific configuration
        """
        self.config = config or {}

    @abstractmethod
    def call(self,
             endpoint_url: str,
             namespace: str,
             operation: str,
             headers: Optional[Dict[str, Dict[str, Any]]] = None,
             parameters: Parameters = ()) -> CallResult:
        """
        Send a named operation and return its result or fault

        Args:
            endpoint_url: Service endpoint
            namespace: Default namespace of the target API
            operation: Operation name, e.g. ``retrieve``
            headers: Header blocks, e.g. ``{"SessionHeader": {"sessionId": ...}}``
            parameters: Ordered operation parameters

        Returns:
            CallResult carrying the decoded result or the fault
        """
        pass

    def close(self) -> None:
        """Release any connections held by the transport"""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
