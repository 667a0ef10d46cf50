"""Tools for folder operations on Iagon storage."""
from typing import Annotated, List, Optional

from fastmcp.exceptions import ToolError
from pydantic import Field

from ..constants import ResponseFormat
from .base import BaseTools, ToolSpec, tool_errors
from .formatting import format_folders_markdown, to_json


class FolderTools(BaseTools):
    """Create, list and delete folders."""

    def specs(self) -> List[ToolSpec]:
        return [
            ToolSpec(self.create_folder, "iagon_create_folder", "Create Folder in Iagon", read_only=False),
            ToolSpec(
                self.list_folders, "iagon_list_folders", "List Folders in Iagon",
                read_only=True, idempotent=True,
            ),
            ToolSpec(
                self.delete_folder, "iagon_delete_folder", "Delete Folder from Iagon",
                read_only=False, destructive=True, idempotent=True,
            ),
        ]

    async def create_folder(
        self,
        name: Annotated[str, Field(min_length=1, max_length=255, description="Name for the new folder")],
        parent_id: Annotated[Optional[str], Field(description="ID of the parent folder")] = None,
    ) -> str:
        """Create a new folder in Iagon storage for organizing files.

        Examples:
          - Create root folder: name="project-videos"
          - Create nested folder: name="raw-footage", parent_id="abc123"
        """
        with tool_errors():
            result = await self._client.create_folder(name, parent_id)

        if not result.success or result.folder is None:
            raise ToolError(f"**Failed to Create Folder**\n\n{result.message}")

        folder = result.folder
        lines = [
            "**Folder Created Successfully**",
            "",
            f"- **Name**: {folder.name}",
            f"- **ID**: `{folder.id}`",
        ]
        if folder.parent_id:
            lines.append(f"- **Parent**: {folder.parent_id}")
        return "\n".join(lines)

    async def list_folders(
        self,
        parent_id: Annotated[
            Optional[str], Field(description="Filter by parent folder ID (omit for root folders)")
        ] = None,
        response_format: Annotated[ResponseFormat, Field(description="Output format")] = ResponseFormat.MARKDOWN,
    ) -> str:
        """List folders in Iagon storage."""
        with tool_errors():
            folders = await self._client.list_folders(parent_id)

        if response_format == ResponseFormat.JSON:
            return to_json({"folders": [f.to_dict() for f in folders], "count": len(folders)})
        return format_folders_markdown(folders)

    async def delete_folder(
        self,
        folder_id: Annotated[str, Field(min_length=1, description="ID of the folder to delete")],
    ) -> str:
        """Delete a folder from Iagon storage.

        **Warning**: This may also delete all files within the folder. This action is permanent.
        """
        with tool_errors():
            result = await self._client.delete_folder(folder_id)

        if not result.success:
            raise ToolError(f"**Delete Failed**\n\n{result.message}")
        return f"**Folder Deleted**\n\nFolder ID `{folder_id}` has been permanently deleted."
