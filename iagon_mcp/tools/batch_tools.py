"""Tools for batch uploads (directory scan and explicit file lists)."""
from functools import partial
from typing import Annotated, List, Optional

from pydantic import Field

from ..constants import MAX_BULK_FILES, ResponseFormat
from ..orchestrator import BatchSummary
from .base import BaseTools, ToolSpec, tool_errors
from .formatting import format_bulk_result_markdown, summary_to_dict, to_json

Format = Annotated[
    ResponseFormat,
    Field(description="Output format: 'markdown' for human-readable or 'json' for machine-readable"),
]


def render_summary(summary: BatchSummary, response_format: ResponseFormat) -> str:
    if response_format == ResponseFormat.JSON:
        return to_json(summary_to_dict(summary))
    if summary.total == 0 and summary.note:
        return summary.note
    return format_bulk_result_markdown(summary)


class BatchTools(BaseTools):
    """Upload many files in one call; each file gets its own outcome."""

    def specs(self) -> List[ToolSpec]:
        return [
            ToolSpec(
                self.upload_directory, "iagon_upload_directory", "Upload Directory to Iagon",
                read_only=False,
            ),
            ToolSpec(self.bulk_upload, "iagon_bulk_upload", "Bulk Upload Files to Iagon", read_only=False),
        ]

    async def upload_directory(
        self,
        local_directory: Annotated[
            str, Field(min_length=1, description="Absolute path to the local directory to upload")
        ],
        folder_id: Annotated[Optional[str], Field(description="ID of the destination folder in Iagon")] = None,
        include_pattern: Annotated[
            Optional[str], Field(description="Glob pattern to filter files (e.g., '*.mp4')")
        ] = None,
        recursive: Annotated[bool, Field(description="Include files from subdirectories")] = False,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> str:
        """Upload all files from a local directory to Iagon storage.

        Files larger than 40MB are skipped; other failures are reported per file
        and never stop the batch.

        Examples:
          - Upload all videos: local_directory="/Users/me/videos", include_pattern="*.mp4"
          - Upload recursively: local_directory="/Users/me/project", recursive=true
        """
        upload_fn = partial(self._client.upload_file, folder_id=folder_id)
        with tool_errors():
            summary = await self._orchestrator.upload_directory(
                local_directory,
                upload_fn,
                recursive=recursive,
                pattern=include_pattern or None,
            )
        return render_summary(summary, response_format)

    async def bulk_upload(
        self,
        file_paths: Annotated[
            List[str],
            Field(
                min_length=1,
                max_length=MAX_BULK_FILES,
                description="Absolute paths to local files to upload (max 100)",
            ),
        ],
        folder_id: Annotated[Optional[str], Field(description="ID of the destination folder in Iagon")] = None,
        response_format: Format = ResponseFormat.MARKDOWN,
    ) -> str:
        """Upload multiple specific files to Iagon storage.

        Files larger than 40MB are skipped; missing files are reported as failed.

        Example:
          file_paths=["/Users/me/video1.mp4", "/Users/me/video2.mp4"]
        """
        upload_fn = partial(self._client.upload_file, folder_id=folder_id)
        with tool_errors():
            summary = await self._orchestrator.bulk_upload(file_paths, upload_fn)
        return render_summary(summary, response_format)
