"""Error reporting decorator for CLI commands"""

import logging
from functools import wraps
from typing import Callable

import click

from ..utils.output import format_error
from ...api.exceptions import SFDCToolError

logger = logging.getLogger(__name__)


def report_errors(func: Callable) -> Callable:
    """Decorator that turns library errors into an error panel and exit code 1

    Anything that is not an SFDCToolError propagates to ``main``.

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SFDCToolError as e:
            logger.debug("Command failed", exc_info=True)
            format_error(e)
            click.get_current_context().exit(1)

    return wrapper
