"""
Protocols (Interfaces) for Dependency Inversion.

The orchestrator and tool layer depend on these, never on the HTTP client
directly, so tests can substitute simple doubles.
"""
from pathlib import Path
from typing import Awaitable, Callable, List, Optional, Protocol, Union, runtime_checkable

from .models import (
    DownloadResult,
    OperationResult,
    RawPage,
    RemoteFile,
    RemoteFolder,
    StorageInfo,
    UploadResult,
)


PathLike = Union[str, Path]

# Single-file upload used by the batch orchestrator.
UploadFn = Callable[[Path], Awaitable[UploadResult]]

# Remote "items from offset, at most limit" call used by the paginator.
FetchRawFn = Callable[[int, int], Awaitable[RawPage]]


@runtime_checkable
class IStorageGateway(Protocol):
    """Interface for Iagon storage operations."""

    async def upload_file(
        self,
        local_path: PathLike,
        remote_name: Optional[str] = None,
        folder_id: Optional[str] = None,
    ) -> UploadResult:
        """Upload one local file."""
        ...

    async def download_file(
        self,
        file_id: str,
        local_path: PathLike,
        node_id: Optional[str] = None,
    ) -> DownloadResult:
        """Download a file by id."""
        ...

    async def get_file_info(self, file_id: str) -> Optional[RemoteFile]:
        """File metadata, or None when absent."""
        ...

    async def delete_file(self, file_id: str) -> OperationResult:
        ...

    async def list_files(
        self,
        folder_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> RawPage:
        ...

    async def search_files(self, query: str, limit: int = 20, offset: int = 0) -> RawPage:
        ...

    async def create_folder(self, name: str, parent_id: Optional[str] = None) -> OperationResult:
        ...

    async def list_folders(self, parent_id: Optional[str] = None) -> List[RemoteFolder]:
        ...

    async def delete_folder(self, folder_id: str) -> OperationResult:
        ...

    async def get_storage_info(self) -> StorageInfo:
        ...
