"""
iagon_mcp - MCP server and batch upload tooling for Iagon decentralized storage.

Usage:
    from iagon_mcp import IagonClient, BatchUploadOrchestrator

    async with IagonClient(token) as client:
        orchestrator = BatchUploadOrchestrator()
        summary = await orchestrator.upload_directory(
            "/videos", client.upload_file, pattern="*.mp4"
        )
        print(summary.successful, summary.failed, summary.skipped)

    # Or run the MCP server
    from iagon_mcp import create_server
    create_server(IagonClient(token)).run()
"""
from .config import Settings
from .errors import ConfigurationError, ErrorKind, GatewayError, IagonError, InputError
from .models import (
    DownloadResult,
    OperationResult,
    Page,
    RemoteFile,
    RemoteFolder,
    StorageInfo,
    UploadResult,
    UploadStatus,
)
from .orchestrator import (
    BatchSummary,
    BatchUploadOrchestrator,
    Failed,
    FileCollector,
    SizePolicy,
    Skipped,
    Succeeded,
    paginate,
)
from .server import create_server
from .services import IagonClient

__version__ = "1.0.0"


__all__ = [
    "Settings",
    "ConfigurationError",
    "ErrorKind",
    "GatewayError",
    "IagonError",
    "InputError",
    "DownloadResult",
    "OperationResult",
    "Page",
    "RemoteFile",
    "RemoteFolder",
    "StorageInfo",
    "UploadResult",
    "UploadStatus",
    "BatchSummary",
    "BatchUploadOrchestrator",
    "Failed",
    "FileCollector",
    "SizePolicy",
    "Skipped",
    "Succeeded",
    "paginate",
    "IagonClient",
    "create_server",
    "__version__",
]
