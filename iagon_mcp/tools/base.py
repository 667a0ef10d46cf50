"""Shared plumbing for tool groups registered on the MCP server."""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations

from ..errors import IagonError
from ..orchestrator import BatchUploadOrchestrator
from ..protocols import IStorageGateway

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    fn: Callable
    name: str
    title: str
    read_only: bool
    destructive: bool = False
    idempotent: bool = False

    @property
    def annotations(self) -> ToolAnnotations:
        return ToolAnnotations(
            title=self.title,
            readOnlyHint=self.read_only,
            destructiveHint=self.destructive,
            idempotentHint=self.idempotent,
            openWorldHint=True,
        )


@contextmanager
def tool_errors() -> Iterator[None]:
    """Re-raise package errors as ToolError so the client sees isError."""
    try:
        yield
    except IagonError as e:
        logger.warning(f"Tool call failed: {e}")
        raise ToolError(f"Error: {e}") from e


class BaseTools:
    """
    A group of tools bound to one gateway.

    Subclasses list their tools in ``specs``; the bound methods' docstrings
    become the tool descriptions.
    """

    def __init__(
        self,
        client: IStorageGateway,
        orchestrator: Optional[BatchUploadOrchestrator] = None,
    ):
        self._client = client
        self._orchestrator = orchestrator or BatchUploadOrchestrator()

    def specs(self) -> List[ToolSpec]:
        raise NotImplementedError

    def register(self, mcp: FastMCP) -> None:
        for spec in self.specs():
            mcp.tool(name=spec.name, annotations=spec.annotations)(spec.fn)
            logger.debug(f"Registered tool: {spec.name}")
