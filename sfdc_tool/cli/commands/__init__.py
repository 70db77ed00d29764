# sfdc_tool/cli/commands/__init__.py
"""CLI commands"""

from . import manifest
from . import retrieve
from . import deploy
from . import listing
from . import query
from . import execute

__all__ = [
    "manifest",
    "retrieve",
    "deploy",
    "listing",
    "query",
    "execute",
]
