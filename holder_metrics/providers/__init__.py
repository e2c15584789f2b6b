"""Data providers for the holder snapshot tool.

This module contains providers for:
- Dune Analytics query results
- Local JSON row exports
"""

from .base import BaseProvider, group_rows_by_chain
from .dune import DuneProvider
from .file_rows import FileRowsProvider

__all__ = ["BaseProvider", "DuneProvider", "FileRowsProvider", "group_rows_by_chain"]
