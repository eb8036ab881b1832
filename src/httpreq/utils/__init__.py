"""Utility functions for httpreq."""

from httpreq.utils.file import (
    is_safe_filename,
    write_file_synced,
)

__all__ = [
    "is_safe_filename",
    "write_file_synced",
]
