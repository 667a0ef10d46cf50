"""Tools for single-file operations on Iagon storage."""
from functools import partial
from typing import Annotated, List, Optional

from fastmcp.exceptions import ToolError
from pydantic import Field

from ..constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, ResponseFormat, format_bytes
from ..orchestrator import Failed, Skipped, Succeeded, paginate
from .base import BaseTools, ToolSpec, tool_errors
from .formatting import (
    format_file_markdown,
    format_files_markdown,
    to_json,
    truncate,
)

Limit = Annotated[
    int,
    Field(ge=1, le=MAX_PAGE_LIMIT, description="Maximum number of results to return (1-100)"),
]
Offset = Annotated[int, Field(ge=0, description="Number of results to skip for pagination")]
Format = Annotated[
    ResponseFormat,
    Field(description="Output format: 'markdown' for human-readable or 'json' for machine-readable"),
]


class FileTools(BaseTools):
    """Upload, download, list, search, inspect and delete files."""

    def specs(self) -> List[ToolSpec]:
        return [
            ToolSpec(self.upload_file, "iagon_upload_file", "Upload File to Iagon", read_only=False),
            ToolSpec(
                self.download_file, "iagon_download_file", "Download File from Iagon",
                read_only=True, idempotent=True,
            ),
            ToolSpec(
                self.list_files, "iagon_list_files", "List Files in Iagon",
                read_only=True, idempotent=True,
            ),
            ToolSpec(
                self.delete_file, "iagon_delete_file", "Delete File from Iagon",
                read_only=False, destructive=True, idempotent=True,
            ),
            ToolSpec(
                self.get_file_info, "iagon_get_file_info", "Get File Info",
                read_only=True, idempotent=True,
            ),
            ToolSpec(
                self.search_files, "iagon_search_files", "Search Files in Iagon",
                read_only=True, idempotent=True,
            ),
        ]

    async def upload_file(
        self,
        local_path: Annotated[str, Field(min_length=1, description="Absolute path to the local file to upload")],
        remote_path: Annotated[
            Optional[str],
            Field(description="Name/path for the file in Iagon storage (defaults to original filename)"),
        ] = None,
        folder_id: Annotated[Optional[str], Field(description="ID of the folder to upload to")] = None,
    ) -> str:
        """Upload a local file to Iagon decentralized storage.

        Files larger than 40MB are rejected before upload, as this exceeds
        Iagon's sharding limit.

        Examples:
          - Upload a video: local_path="/Users/me/videos/clip.mp4"
          - Upload with custom name: local_path="/tmp/video.mp4", remote_path="project-a/final.mp4"

        Returns:
          Success status with the new file ID.
        """
        upload_fn = partial(self._client.upload_file, remote_name=remote_path, folder_id=folder_id)
        with tool_errors():
            outcome = await self._orchestrator.upload_one(local_path, upload_fn)

        if isinstance(outcome, Succeeded):
            name = remote_path or outcome.path.name
            return (
                "**Upload Successful**\n\n"
                f"- File: {name}\n"
                f"- Size: {format_bytes(outcome.size)}\n"
                f"- ID: `{outcome.remote_id}`"
            )
        if isinstance(outcome, Skipped):
            raise ToolError(
                f"**Upload Skipped**\n\n{outcome.path.name}: {outcome.message}. "
                "Consider compressing the file or splitting it into smaller segments."
            )
        if isinstance(outcome, Failed):
            detail = outcome.message
            if detail == "File not found":
                detail = f"File not found: {local_path}"
            raise ToolError(f"**Upload Failed**\n\n{detail}")
        raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")

    async def download_file(
        self,
        file_id: Annotated[str, Field(min_length=1, description="ID of the file to download from Iagon")],
        local_path: Annotated[str, Field(min_length=1, description="Absolute path where the file should be saved locally")],
    ) -> str:
        """Download a file from Iagon storage to the local filesystem.

        Example:
          - file_id="abc123", local_path="/Users/me/downloads/video.mp4"
        """
        with tool_errors():
            result = await self._client.download_file(file_id, local_path)

        if not result.success:
            raise ToolError(f"**Download Failed**\n\n{result.message}")
        return (
            "**Download Successful**\n\n"
            f"- File: {result.filename}\n"
            f"- Size: {format_bytes(result.file_size)}\n"
            f"- Saved to: {result.local_path}"
        )

    async def list_files(
        self,
        folder_id: Annotated[Optional[str], Field(description="Filter files by folder ID")] = None,
        limit: Limit = DEFAULT_PAGE_LIMIT,
        offset: Offset = 0,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> str:
        """List files stored in Iagon (paginated).

        Returns:
          Files with ID, name, size and creation date, plus the offset of the
          next page when more files are available.
        """
        fetch = partial(self._list_raw, folder_id)
        with tool_errors():
            page = await paginate(fetch, limit, offset)

        if response_format == ResponseFormat.JSON:
            text = to_json(page.to_dict())
        else:
            text = format_files_markdown(page)
        return truncate(text)

    async def _list_raw(self, folder_id: Optional[str], limit: int, offset: int):
        return await self._client.list_files(folder_id=folder_id, limit=limit, offset=offset)

    async def delete_file(
        self,
        file_id: Annotated[str, Field(min_length=1, description="ID of the file to delete")],
    ) -> str:
        """Delete a file from Iagon storage.

        **Warning**: This action is permanent and cannot be undone.
        """
        with tool_errors():
            result = await self._client.delete_file(file_id)

        if not result.success:
            raise ToolError(f"**Delete Failed**\n\n{result.message}")
        return f"**File Deleted**\n\nFile ID `{file_id}` has been permanently deleted."

    async def get_file_info(
        self,
        file_id: Annotated[str, Field(min_length=1, description="ID of the file")],
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> str:
        """Get metadata (name, size, type, timestamps) for a file in Iagon storage."""
        with tool_errors():
            file = await self._client.get_file_info(file_id)

        if file is None:
            raise ToolError(f"File not found: {file_id}")
        if response_format == ResponseFormat.JSON:
            return to_json(file.to_dict())
        return format_file_markdown(file)

    async def search_files(
        self,
        query: Annotated[
            str,
            Field(min_length=1, max_length=200, description="Search string to match against file names"),
        ],
        limit: Limit = DEFAULT_PAGE_LIMIT,
        offset: Offset = 0,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> str:
        """Search for files by name or pattern in Iagon storage (paginated).

        Examples:
          - Search for MP4 files: query=".mp4"
          - Search for project files: query="project-a"
        """
        fetch = partial(self._search_raw, query)
        with tool_errors():
            page = await paginate(fetch, limit, offset)

        if response_format == ResponseFormat.JSON:
            text = to_json(page.to_dict())
        else:
            text = format_files_markdown(page, title=f'Search Results: "{query}"')
        return truncate(text)

    async def _search_raw(self, query: str, limit: int, offset: int):
        return await self._client.search_files(query, limit=limit, offset=offset)
