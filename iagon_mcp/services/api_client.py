"""
HTTP gateway for the Iagon storage API.

Implements IStorageGateway over two httpx.AsyncClient instances: one for the
metadata/control API and one for the download data endpoint. Every HTTP or
transport failure is classified into a GatewayError; nothing is retried.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import httpx

from ..config import TOKEN_ENV, TOKEN_HELP, Settings
from ..constants import (
    API_TIMEOUT,
    IAGON_API_BASE_URL,
    IAGON_DOWNLOAD_URL,
    UPLOAD_TIMEOUT,
    format_bytes,
)
from ..errors import ConfigurationError, ErrorKind, GatewayError
from ..models import (
    DownloadResult,
    OperationResult,
    RawPage,
    RemoteFile,
    RemoteFolder,
    StorageInfo,
    UploadResult,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

_STATUS_MESSAGES = {
    401: (
        ErrorKind.AUTH,
        f"Authentication failed. Please check your {TOKEN_ENV} is valid. "
        "Generate a new one at https://app.iagon.com -> Settings.",
    ),
    403: (ErrorKind.PERMISSION, "Permission denied. You don't have access to this resource."),
    404: (ErrorKind.NOT_FOUND, "Resource not found. Please check the file/folder ID is correct."),
    408: (ErrorKind.TIMEOUT, "Request timed out. The file may be too large or the network is slow."),
    413: (ErrorKind.PAYLOAD_TOO_LARGE, "File too large. Iagon has a 40MB limit per file for sharding."),
    429: (ErrorKind.RATE_LIMITED, "Rate limit exceeded. Please wait before making more requests."),
}


def _json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return {}


def _remote_message(response: httpx.Response) -> Optional[str]:
    payload = _json(response)
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        if isinstance(message, str) and message:
            return message
    return None


def classify_response(response: httpx.Response) -> GatewayError:
    """Map an HTTP error response to a classified GatewayError."""
    status = response.status_code
    if status in _STATUS_MESSAGES:
        kind, message = _STATUS_MESSAGES[status]
        return GatewayError(kind, message, status_code=status)

    remote_message = _remote_message(response)
    if status >= 500:
        return GatewayError(
            ErrorKind.SERVER,
            remote_message or "Iagon server error. Please try again later.",
            status_code=status,
        )
    return GatewayError(
        ErrorKind.UNKNOWN,
        remote_message or f"API request failed with status {status}",
        status_code=status,
    )


def classify_transport_error(exc: httpx.HTTPError) -> GatewayError:
    """Map an httpx transport exception to a classified GatewayError."""
    if isinstance(exc, httpx.TimeoutException):
        return GatewayError(
            ErrorKind.TIMEOUT,
            "Request timed out. The file may be too large or the network is slow.",
        )
    if isinstance(exc, httpx.ConnectError):
        return GatewayError(
            ErrorKind.CONNECTIVITY,
            "Cannot connect to Iagon servers. Please check your internet connection.",
        )
    return GatewayError(ErrorKind.UNKNOWN, f"Unexpected error: {str(exc) or type(exc).__name__}")


def _params(**values: Any) -> Dict[str, Any]:
    """Drop unset query/form values so they are not sent as empty strings."""
    return {key: value for key, value in values.items() if value is not None}


def _parse(parse: Callable[..., Any], *args: Any) -> Any:
    """Run a payload parser, classifying a malformed response as a GatewayError."""
    try:
        return parse(*args)
    except (TypeError, ValueError, AttributeError) as exc:
        raise GatewayError(ErrorKind.UNKNOWN, f"Unexpected response from Iagon: {exc}") from exc


def _raw_page(
    payload: Any,
    key: str,
    parse: Callable[[Dict[str, Any]], Any],
    offset: int,
) -> RawPage:
    if isinstance(payload, list):
        raw_items, total = payload, None
    else:
        raw_items = payload.get(key) or payload.get("items") or []
        total = payload.get("total")
    items = tuple(parse(item) for item in raw_items)
    if not total:
        total = offset + len(items)
    return RawPage(items=items, total=int(total))


class IagonClient:
    """
    Async gateway to Iagon storage.

    Implements IStorageGateway protocol. The bearer token is validated once
    here and attached to every request; it is never refreshed.

    Usage:
        async with IagonClient(token) as client:
            result = await client.upload_file("/videos/clip.mp4")
    """

    def __init__(
        self,
        access_token: Optional[str] = None,
        api_base_url: str = IAGON_API_BASE_URL,
        download_url: str = IAGON_DOWNLOAD_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the gateway.

        Args:
            access_token: Iagon access token (falls back to IAGON_ACCESS_TOKEN)
            api_base_url: Metadata/control API base URL
            download_url: Download data API base URL
            transport: Optional httpx transport (tests use httpx.MockTransport)

        Raises:
            ConfigurationError: no token available
        """
        token = (access_token or os.getenv(TOKEN_ENV) or "").strip()
        if not token:
            raise ConfigurationError(TOKEN_HELP)

        auth_header = {"Authorization": f"Bearer {token}"}
        self._client = httpx.AsyncClient(
            base_url=api_base_url,
            timeout=API_TIMEOUT,
            headers={**auth_header, "Accept": "application/json"},
            transport=transport,
        )
        self._download_client = httpx.AsyncClient(
            base_url=download_url,
            timeout=UPLOAD_TIMEOUT,
            headers=auth_header,
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "IagonClient":
        return cls(
            access_token=settings.access_token,
            api_base_url=settings.api_base_url,
            download_url=settings.download_url,
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()
        await self._download_client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Send a request on the API client, raising GatewayError on any failure."""
        logger.debug(f"{method} {url}")
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise classify_transport_error(exc) from exc

        if response.status_code >= 400:
            error = classify_response(response)
            logger.warning(f"{method} {url} failed ({response.status_code}): {error.message}")
            raise error
        return response

    # Files

    async def upload_file(
        self,
        local_path: PathLike,
        remote_name: Optional[str] = None,
        folder_id: Optional[str] = None,
    ) -> UploadResult:
        """
        Upload a local file as one multipart request.

        Args:
            local_path: File to upload
            remote_name: Name in Iagon (defaults to the local file name)
            folder_id: Destination folder id

        Returns:
            UploadResult; failures carry the classified ErrorKind and message
        """
        path = Path(local_path)
        filename = remote_name or path.name

        if not path.is_file():
            return UploadResult.fail(filename, ErrorKind.INPUT, f"File not found: {path}")

        file_size = path.stat().st_size
        logger.debug(f"Uploading {path} as {filename} ({format_bytes(file_size)})")

        try:
            with path.open("rb") as fh:
                response = await self._request(
                    "POST",
                    "/files/upload",
                    files={"file": (filename, fh)},
                    data=_params(folderId=folder_id) or None,
                    timeout=UPLOAD_TIMEOUT,
                )
        except GatewayError as exc:
            return UploadResult.fail(filename, exc.kind, exc.message, file_size)
        except OSError as exc:
            return UploadResult.fail(
                filename, ErrorKind.INPUT, f"Could not read {path}: {exc}", file_size
            )

        payload = _json(response)
        file_id = None
        if isinstance(payload, dict):
            file_id = payload.get("id") or payload.get("fileId")

        return UploadResult.ok(
            filename=filename,
            file_id=str(file_id) if file_id is not None else None,
            file_size=file_size,
            message=f"Successfully uploaded {filename} ({format_bytes(file_size)})",
        )

    async def download_file(
        self,
        file_id: str,
        local_path: PathLike,
        node_id: Optional[str] = None,
    ) -> DownloadResult:
        """
        Stream a file to disk.

        Metadata is looked up on every call to resolve the storage node id.
        """
        target = Path(local_path)

        try:
            info = await self.get_file_info(file_id)
        except GatewayError as exc:
            return DownloadResult.fail(str(target), file_id, exc.kind, exc.message)

        if info is None:
            return DownloadResult.fail(
                str(target), file_id, ErrorKind.NOT_FOUND, f"File not found: {file_id}"
            )

        filename = target.name or info.name or file_id
        params = _params(nodeId=node_id or info.node_id, filename=info.name or file_id)
        written = 0
        # Only a complete download ever lands at target
        partial = target.with_name(target.name + ".part")

        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            async with self._download_client.stream("GET", "/download", params=params) as response:
                if response.status_code >= 400:
                    await response.aread()
                    raise classify_response(response)
                with partial.open("wb") as fh:
                    async for chunk in response.aiter_bytes():
                        fh.write(chunk)
                        written += len(chunk)
            partial.replace(target)
        except httpx.HTTPError as exc:
            partial.unlink(missing_ok=True)
            error = classify_transport_error(exc)
            logger.warning(f"Download of {file_id} failed: {error.message}")
            return DownloadResult.fail(str(target), filename, error.kind, error.message)
        except GatewayError as exc:
            partial.unlink(missing_ok=True)
            logger.warning(f"Download of {file_id} failed: {exc.message}")
            return DownloadResult.fail(str(target), filename, exc.kind, exc.message)
        except OSError as exc:
            partial.unlink(missing_ok=True)
            return DownloadResult.fail(
                str(target), filename, ErrorKind.UNKNOWN, f"Download failed: {exc}"
            )

        logger.info(f"Downloaded {file_id} to {target} ({format_bytes(written)})")
        return DownloadResult.ok(str(target), filename, written)

    async def get_file_info(self, file_id: str) -> Optional[RemoteFile]:
        """File metadata, or None if Iagon reports 404."""
        try:
            response = await self._request("GET", f"/files/{file_id}")
        except GatewayError as exc:
            if exc.kind == ErrorKind.NOT_FOUND:
                return None
            raise
        return _parse(RemoteFile.from_api, _json(response))

    async def delete_file(self, file_id: str) -> OperationResult:
        try:
            await self._request("DELETE", f"/files/{file_id}")
        except GatewayError as exc:
            return OperationResult.fail(exc.kind, exc.message)
        return OperationResult.ok(f"File {file_id} deleted successfully")

    async def list_files(
        self,
        folder_id: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> RawPage:
        response = await self._request(
            "GET", "/files", params=_params(folderId=folder_id, limit=limit, offset=offset)
        )
        return _parse(_raw_page, _json(response), "files", RemoteFile.from_api, offset)

    async def search_files(self, query: str, limit: int = 20, offset: int = 0) -> RawPage:
        response = await self._request(
            "GET", "/files/search", params=_params(q=query, limit=limit, offset=offset)
        )
        return _parse(_raw_page, _json(response), "files", RemoteFile.from_api, offset)

    # Folders

    async def create_folder(self, name: str, parent_id: Optional[str] = None) -> OperationResult:
        try:
            response = await self._request(
                "POST", "/folders", json=_params(name=name, parentId=parent_id)
            )
            folder = _parse(RemoteFolder.from_api, _json(response))
        except GatewayError as exc:
            return OperationResult.fail(exc.kind, exc.message)
        return OperationResult.ok(f'Folder "{name}" created successfully', folder=folder)

    async def list_folders(self, parent_id: Optional[str] = None) -> List[RemoteFolder]:
        response = await self._request("GET", "/folders", params=_params(parentId=parent_id))
        return list(_parse(_raw_page, _json(response), "folders", RemoteFolder.from_api, 0).items)

    async def delete_folder(self, folder_id: str) -> OperationResult:
        try:
            await self._request("DELETE", f"/folders/{folder_id}")
        except GatewayError as exc:
            return OperationResult.fail(exc.kind, exc.message)
        return OperationResult.ok(f"Folder {folder_id} deleted successfully")

    # Account

    async def get_storage_info(self) -> StorageInfo:
        response = await self._request("GET", "/storage/info")
        return _parse(StorageInfo.from_api, _json(response))
