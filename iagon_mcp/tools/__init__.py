"""Tool groups exposed on the MCP server."""
from .base import BaseTools, ToolSpec, tool_errors
from .batch_tools import BatchTools
from .file_tools import FileTools
from .folder_tools import FolderTools
from .storage_tools import StorageTools

TOOL_GROUPS = (FileTools, FolderTools, StorageTools, BatchTools)

__all__ = [
    "BaseTools",
    "ToolSpec",
    "tool_errors",
    "BatchTools",
    "FileTools",
    "FolderTools",
    "StorageTools",
    "TOOL_GROUPS",
]
