"""Iagon service constants and display helpers."""
from enum import Enum


# API endpoints
IAGON_API_BASE_URL = "https://gw.v2.iagon.com/api/v2"
IAGON_DOWNLOAD_URL = "https://da.iagon.com/api/v1"

# Limits
FILE_SIZE_LIMIT = 40 * 1024 * 1024  # 40MB - Iagon's sharding limit
CHARACTER_LIMIT = 25000  # Max rendered tool response size
DEFAULT_PAGE_LIMIT = 20
MAX_PAGE_LIMIT = 100
MAX_BULK_FILES = 100

# Timeouts (seconds)
API_TIMEOUT = 30.0
UPLOAD_TIMEOUT = 300.0  # 5 minutes for uploads and downloads

SERVER_NAME = "iagon-mcp-server"


class ResponseFormat(str, Enum):
    """Output format for tool responses."""
    MARKDOWN = "markdown"
    JSON = "json"


def format_bytes(value: int) -> str:
    """
    Format a byte count with 1024-based units.

    Trailing zeros are dropped: 1536 -> "1.5 KB", 41943040 -> "40 MB".
    """
    if value <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    size = float(value)
    unit_idx = 0
    while size >= 1024.0 and unit_idx < len(units) - 1:
        size /= 1024.0
        unit_idx += 1
    return f"{round(size, 2):g} {units[unit_idx]}"
