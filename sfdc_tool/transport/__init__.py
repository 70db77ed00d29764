"""Remote call transports"""

from .base import CallResult, Transport
from .soap import SoapTransport

__all__ = [
    "CallResult",
    "Transport",
    "SoapTransport",
]
