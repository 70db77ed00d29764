"""CLI decorators"""

from .errors import report_errors

__all__ = [
    'report_errors',
]
