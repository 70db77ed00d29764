"""CLI utility functions"""

from .output import (
    format_manifest,
    format_records,
    format_file_list,
    format_deploy_result,
    format_retrieve_result,
    format_apex_result,
    format_error,
)

__all__ = [
    # Output utilities
    'format_manifest',
    'format_records',
    'format_file_list',
    'format_deploy_result',
    'format_retrieve_result',
    'format_apex_result',
    'format_error',
]
