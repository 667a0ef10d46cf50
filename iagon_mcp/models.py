"""
Models for the Iagon gateway.

Immutable dataclasses mirroring Iagon API payloads and single-call results.
Remote payloads use camelCase keys; ``from_api`` accepts them and ``to_dict``
produces them again for JSON rendering.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, Tuple, TypeVar
from enum import Enum

from .errors import ErrorKind

T = TypeVar("T")


class UploadStatus(Enum):
    """Single operation status."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class RemoteFile:
    """File metadata as reported by Iagon."""
    id: str
    name: str
    size: int = 0
    mime_type: Optional[str] = None
    folder_id: Optional[str] = None
    node_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemoteFile":
        return cls(
            id=str(data.get("id") or data.get("fileId") or ""),
            name=data.get("name") or data.get("fileName") or "",
            size=int(data.get("size") or 0),
            mime_type=data.get("mimeType"),
            folder_id=data.get("folderId"),
            node_id=data.get("nodeId"),
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "size": self.size,
            "mimeType": self.mime_type,
            "folderId": self.folder_id,
            "nodeId": self.node_id,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class RemoteFolder:
    """Folder metadata as reported by Iagon."""
    id: str
    name: str
    parent_id: Optional[str] = None
    file_count: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RemoteFolder":
        file_count = data.get("fileCount")
        return cls(
            id=str(data.get("id") or ""),
            name=data.get("name") or "",
            parent_id=data.get("parentId"),
            file_count=int(file_count) if file_count is not None else None,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "name": self.name,
            "parentId": self.parent_id,
            "fileCount": self.file_count,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass(frozen=True)
class StorageInfo:
    """Quota and usage for the authenticated account."""
    used: int = 0
    total: int = 0
    available: int = 0
    file_count: int = 0
    folder_count: int = 0

    @property
    def usage_percent(self) -> float:
        if self.total <= 0:
            return 0.0
        return round(self.used / self.total * 100, 1)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "StorageInfo":
        return cls(
            used=int(data.get("used") or 0),
            total=int(data.get("total") or 0),
            available=int(data.get("available") or 0),
            file_count=int(data.get("fileCount") or 0),
            folder_count=int(data.get("folderCount") or 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "used": self.used,
            "total": self.total,
            "available": self.available,
            "fileCount": self.file_count,
            "folderCount": self.folder_count,
            "usagePercent": self.usage_percent,
        }


@dataclass(frozen=True)
class RawPage(Generic[T]):
    """Unprocessed page as returned by a list/search endpoint."""
    items: Tuple[T, ...]
    total: int


@dataclass(frozen=True)
class Page(Generic[T]):
    """One bounded window of a remote collection."""
    items: Tuple[T, ...]
    total: int
    offset: int

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def has_more(self) -> bool:
        return self.total > self.offset + self.count

    @property
    def next_offset(self) -> Optional[int]:
        """Offset to request next; None on the last page."""
        if not self.has_more:
            return None
        return self.offset + self.count

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "items": [item.to_dict() if hasattr(item, "to_dict") else item for item in self.items],
            "total": self.total,
            "count": self.count,
            "offset": self.offset,
            "hasMore": self.has_more,
        }
        if self.next_offset is not None:
            data["nextOffset"] = self.next_offset
        return data


@dataclass(frozen=True)
class UploadResult:
    """Immutable result of a single upload request."""
    filename: str
    status: UploadStatus = UploadStatus.SUCCESS
    file_id: Optional[str] = None
    file_size: int = 0
    message: str = ""
    error_kind: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.SUCCESS

    @classmethod
    def ok(cls, filename: str, file_id: str, file_size: int, message: str = ""):
        return cls(
            filename=filename,
            status=UploadStatus.SUCCESS,
            file_id=file_id,
            file_size=file_size,
            message=message,
        )

    @classmethod
    def fail(cls, filename: str, kind: ErrorKind, message: str, file_size: int = 0):
        return cls(
            filename=filename,
            status=UploadStatus.FAILED,
            file_size=file_size,
            message=message,
            error_kind=kind,
        )


@dataclass(frozen=True)
class DownloadResult:
    """Immutable result of a single download request."""
    local_path: str
    filename: str
    status: UploadStatus = UploadStatus.SUCCESS
    file_size: int = 0
    message: str = ""
    error_kind: Optional[ErrorKind] = None

    @property
    def success(self) -> bool:
        return self.status == UploadStatus.SUCCESS

    @classmethod
    def ok(cls, local_path: str, filename: str, file_size: int):
        return cls(
            local_path=local_path,
            filename=filename,
            file_size=file_size,
            message=f"Successfully downloaded {filename} to {local_path}",
        )

    @classmethod
    def fail(cls, local_path: str, filename: str, kind: ErrorKind, message: str):
        return cls(
            local_path=local_path,
            filename=filename,
            status=UploadStatus.FAILED,
            message=message,
            error_kind=kind,
        )


@dataclass(frozen=True)
class OperationResult:
    """Result of a mutating call with no payload (delete, create)."""
    success: bool
    message: str
    error_kind: Optional[ErrorKind] = None
    folder: Optional[RemoteFolder] = field(default=None)

    @classmethod
    def ok(cls, message: str, folder: Optional[RemoteFolder] = None):
        return cls(success=True, message=message, folder=folder)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str):
        return cls(success=False, message=message, error_kind=kind)
