"""Tests for the MCP tool layer."""
import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from fastmcp import Client
from fastmcp.exceptions import ToolError

from iagon_mcp.constants import ResponseFormat
from iagon_mcp.errors import ErrorKind, GatewayError
from iagon_mcp.models import (
    DownloadResult,
    OperationResult,
    RawPage,
    RemoteFile,
    RemoteFolder,
    StorageInfo,
    UploadResult,
)
from iagon_mcp.server import create_server
from iagon_mcp.tools import BatchTools, FileTools, FolderTools, StorageTools

EXPECTED_TOOLS = {
    "iagon_upload_file",
    "iagon_download_file",
    "iagon_list_files",
    "iagon_delete_file",
    "iagon_get_file_info",
    "iagon_search_files",
    "iagon_create_folder",
    "iagon_list_folders",
    "iagon_delete_folder",
    "iagon_get_storage_info",
    "iagon_upload_directory",
    "iagon_bulk_upload",
}


def _write(path: Path, size: int) -> Path:
    with path.open("wb") as f:
        f.truncate(size)
    return path


@pytest.fixture
def gateway():
    client = AsyncMock()

    async def upload(path, remote_name=None, folder_id=None):
        return UploadResult.ok(remote_name or Path(path).name, f"id-{Path(path).name}", 1)

    client.upload_file.side_effect = upload
    return client


def _files(n: int, total: int) -> RawPage:
    return RawPage(items=tuple(RemoteFile(id=str(i), name=f"f{i}.mp4", size=1024) for i in range(n)), total=total)


# File tools

@pytest.mark.asyncio
async def test_upload_file_success(gateway, tmp_path):
    path = _write(tmp_path / "clip.mp4", 2048)

    text = await FileTools(gateway).upload_file(str(path), folder_id="dir-1")

    assert "**Upload Successful**" in text
    assert "`id-clip.mp4`" in text
    gateway.upload_file.assert_awaited_once_with(path, remote_name=None, folder_id="dir-1")


@pytest.mark.asyncio
async def test_upload_file_oversized_is_error_without_request(gateway, tmp_path):
    path = _write(tmp_path / "big.mp4", 50 * 1024 * 1024)

    with pytest.raises(ToolError, match="limit"):
        await FileTools(gateway).upload_file(str(path))

    gateway.upload_file.assert_not_awaited()


@pytest.mark.asyncio
async def test_upload_file_missing_is_error(gateway, tmp_path):
    missing = tmp_path / "ghost.mp4"
    with pytest.raises(ToolError, match="File not found"):
        await FileTools(gateway).upload_file(str(missing))


@pytest.mark.asyncio
async def test_upload_file_remote_rejection_is_error(gateway, tmp_path):
    path = _write(tmp_path / "a.bin", 1)
    gateway.upload_file.side_effect = None
    gateway.upload_file.return_value = UploadResult.fail(
        "a.bin", ErrorKind.PAYLOAD_TOO_LARGE, "File too large. Iagon has a 40MB limit per file for sharding."
    )

    with pytest.raises(ToolError, match="40MB limit"):
        await FileTools(gateway).upload_file(str(path))


@pytest.mark.asyncio
async def test_list_files_json_has_navigation(gateway):
    gateway.list_files.return_value = _files(20, 45)

    text = await FileTools(gateway).list_files(limit=20, offset=0, response_format=ResponseFormat.JSON)
    data = json.loads(text)

    assert data["count"] == 20
    assert data["total"] == 45
    assert data["hasMore"] is True
    assert data["nextOffset"] == 20
    gateway.list_files.assert_awaited_once_with(folder_id=None, limit=20, offset=0)


@pytest.mark.asyncio
async def test_list_files_markdown_mentions_next_offset(gateway):
    gateway.list_files.return_value = _files(5, 45)

    text = await FileTools(gateway).list_files(limit=5, offset=20)

    assert "Showing 5 of 45 files (offset: 20)" in text
    assert "offset=25" in text


@pytest.mark.asyncio
async def test_list_files_invalid_limit_is_error(gateway):
    with pytest.raises(ToolError):
        await FileTools(gateway).list_files(limit=0)
    gateway.list_files.assert_not_awaited()


@pytest.mark.asyncio
async def test_list_files_gateway_error_is_tool_error(gateway):
    gateway.list_files.side_effect = GatewayError(ErrorKind.AUTH, "Authentication failed.")
    with pytest.raises(ToolError, match="Authentication failed"):
        await FileTools(gateway).list_files()


@pytest.mark.asyncio
async def test_search_files_markdown_title(gateway):
    gateway.search_files.return_value = _files(1, 1)

    text = await FileTools(gateway).search_files("f0")

    assert '# Search Results: "f0"' in text
    assert "More files available" not in text


@pytest.mark.asyncio
async def test_get_file_info_not_found(gateway):
    gateway.get_file_info.return_value = None
    with pytest.raises(ToolError, match="File not found: f9"):
        await FileTools(gateway).get_file_info("f9")


@pytest.mark.asyncio
async def test_download_failure_is_error(gateway, tmp_path):
    gateway.download_file.return_value = DownloadResult.fail(
        str(tmp_path / "x"), "f1", ErrorKind.NOT_FOUND, "File not found: f1"
    )
    with pytest.raises(ToolError, match="File not found: f1"):
        await FileTools(gateway).download_file("f1", str(tmp_path / "x"))


@pytest.mark.asyncio
async def test_delete_file_success(gateway):
    gateway.delete_file.return_value = OperationResult.ok("File f1 deleted successfully")
    text = await FileTools(gateway).delete_file("f1")
    assert "`f1`" in text


# Folder and storage tools

@pytest.mark.asyncio
async def test_create_folder(gateway):
    gateway.create_folder.return_value = OperationResult.ok(
        'Folder "raw" created successfully', folder=RemoteFolder(id="d1", name="raw")
    )
    text = await FolderTools(gateway).create_folder("raw")
    assert "`d1`" in text


@pytest.mark.asyncio
async def test_list_folders_json(gateway):
    gateway.list_folders.return_value = [RemoteFolder(id="d1", name="raw")]
    data = json.loads(await FolderTools(gateway).list_folders(response_format=ResponseFormat.JSON))
    assert data == {"folders": [{"id": "d1", "name": "raw"}], "count": 1}


@pytest.mark.asyncio
async def test_delete_folder_failure(gateway):
    gateway.delete_folder.return_value = OperationResult.fail(ErrorKind.NOT_FOUND, "Resource not found.")
    with pytest.raises(ToolError, match="Resource not found"):
        await FolderTools(gateway).delete_folder("d1")


@pytest.mark.asyncio
async def test_storage_info_json(gateway):
    gateway.get_storage_info.return_value = StorageInfo(used=1024, total=4096, available=3072)
    data = json.loads(await StorageTools(gateway).get_storage_info(ResponseFormat.JSON))
    assert data["usagePercent"] == 25.0
    assert data["usedFormatted"] == "1 KB"


# Batch tools

@pytest.mark.asyncio
async def test_bulk_upload_json(gateway, tmp_path):
    small = _write(tmp_path / "small.bin", 10)
    big = _write(tmp_path / "big.bin", 50 * 1024 * 1024)
    missing = tmp_path / "missing.bin"

    text = await BatchTools(gateway).bulk_upload(
        [str(missing), str(big), str(small)], response_format=ResponseFormat.JSON
    )
    data = json.loads(text)

    assert (data["total"], data["successful"], data["failed"], data["skipped"]) == (3, 1, 1, 1)
    assert [r["status"] for r in data["results"]] == ["failed", "skipped", "success"]
    assert data["results"][0]["errorKind"] == "input"
    assert data["results"][2]["fileId"] == "id-small.bin"
    gateway.upload_file.assert_awaited_once_with(small, folder_id=None)


@pytest.mark.asyncio
async def test_bulk_upload_markdown(gateway, tmp_path):
    path = _write(tmp_path / "a.bin", 10)
    text = await BatchTools(gateway).bulk_upload([str(path)])
    assert "# Bulk Upload Results" in text
    assert "[+] **a.bin**" in text


@pytest.mark.asyncio
async def test_upload_directory_empty_returns_note(gateway, tmp_path):
    text = await BatchTools(gateway).upload_directory(str(tmp_path), include_pattern="*.mp4")
    assert text == f'No files found in {tmp_path} matching pattern "*.mp4"'


@pytest.mark.asyncio
async def test_upload_directory_missing_is_error(gateway, tmp_path):
    with pytest.raises(ToolError, match="Directory not found"):
        await BatchTools(gateway).upload_directory(str(tmp_path / "nope"))


# Server

@pytest.mark.asyncio
async def test_server_registers_all_tools(gateway):
    async with Client(create_server(gateway)) as client:
        tools = await client.list_tools()

    assert {tool.name for tool in tools} == EXPECTED_TOOLS
    by_name = {tool.name: tool for tool in tools}
    assert by_name["iagon_delete_folder"].annotations.destructiveHint is True
    assert by_name["iagon_list_files"].annotations.readOnlyHint is True


@pytest.mark.asyncio
async def test_server_call_tool_round_trip(gateway):
    gateway.get_storage_info.return_value = StorageInfo(used=0, total=100, available=100)

    async with Client(create_server(gateway)) as client:
        result = await client.call_tool("iagon_get_storage_info", {"response_format": "json"})

    data = json.loads(result.content[0].text)
    assert data["total"] == 100

