# sfdc_tool/utils/__init__.py
"""Utility functions for sfdc-tool"""

from .zip_utils import make_zip, unzip

__all__ = [
    "make_zip",
    "unzip",
]
