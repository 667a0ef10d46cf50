"""MCP server wiring: one gateway, one orchestrator, all tool groups."""
import logging
from typing import Optional

from fastmcp import FastMCP

from .config import Settings
from .constants import SERVER_NAME
from .orchestrator import BatchUploadOrchestrator
from .protocols import IStorageGateway
from .tools import TOOL_GROUPS

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Tools for Iagon decentralized storage. Files are limited to 40MB each; "
    "larger files are skipped before upload. Listing and search are paginated: "
    "pass the returned next offset to fetch the following page. Batch uploads "
    "report one result per file and never stop on the first failure."
)


def create_server(
    client: IStorageGateway,
    orchestrator: Optional[BatchUploadOrchestrator] = None,
) -> FastMCP:
    """
    Build the FastMCP server around an already constructed gateway.

    The gateway is shared by every session and lives as long as the process.
    """
    orchestrator = orchestrator or BatchUploadOrchestrator()
    mcp = FastMCP(SERVER_NAME, instructions=INSTRUCTIONS)
    for group in TOOL_GROUPS:
        group(client, orchestrator).register(mcp)
    return mcp


def run_server(server: FastMCP, settings: Settings) -> None:
    """Serve over stdio (default) or streamable HTTP."""
    if settings.transport == "http":
        logger.info(f"Iagon MCP server listening on http://{settings.host}:{settings.port}")
        server.run(transport="http", host=settings.host, port=settings.port)
    else:
        logger.info("Iagon MCP server running via stdio")
        server.run(transport="stdio")
