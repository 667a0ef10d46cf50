"""Tools for storage quota information."""
from typing import Annotated, List

from pydantic import Field

from ..constants import ResponseFormat
from .base import BaseTools, ToolSpec, tool_errors
from .formatting import format_storage_markdown, storage_info_to_dict, to_json


class StorageTools(BaseTools):

    def specs(self) -> List[ToolSpec]:
        return [
            ToolSpec(
                self.get_storage_info, "iagon_get_storage_info", "Get Storage Info",
                read_only=True, idempotent=True,
            ),
        ]

    async def get_storage_info(
        self,
        response_format: Annotated[ResponseFormat, Field(description="Output format")] = ResponseFormat.MARKDOWN,
    ) -> str:
        """Get Iagon storage quota and usage: used/available space and file/folder counts."""
        with tool_errors():
            info = await self._client.get_storage_info()

        if response_format == ResponseFormat.JSON:
            return to_json(storage_info_to_dict(info))
        return format_storage_markdown(info)
