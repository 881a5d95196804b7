"""Client for the file storage endpoints."""

import json
import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

from loguru import logger

from gemini_client.config import DEFAULT_API_VERSION, DEFAULT_BASE_URL, RequestOptions
from gemini_client.models.files import (
    FileMetadata,
    FileRecord,
    ListFilesResponse,
    ListParams,
    UploadFileResponse,
)
from gemini_client.services.request import (
    get_client_headers,
    make_request,
    parse_response,
    read_json,
)
from gemini_client.services.session import get_session


class FilesTask(str, Enum):
    UPLOAD = "upload"
    LIST = "list"
    GET = "get"
    DELETE = "delete"


METHODS = {
    FilesTask.UPLOAD: "POST",
    FilesTask.LIST: "GET",
    FilesTask.GET: "GET",
    FilesTask.DELETE: "DELETE",
}


@dataclass(frozen=True, repr=False)
class FilesRequestUrl:
    """Endpoint of a files task. The API key travels in a header, not here."""

    task: FilesTask
    api_version: str = DEFAULT_API_VERSION
    base_url: str = DEFAULT_BASE_URL
    file_id: str | None = None
    params: dict[str, Any] = field(default_factory=dict)

    def to_string(self, api_key: str | None = None) -> str:
        prefix = "/upload" if self.task is FilesTask.UPLOAD else ""
        url = f"{self.base_url}{prefix}/{self.api_version}/files"
        if self.file_id:
            url += f"/{self.file_id}"
        query = {key: value for key, value in self.params.items() if value is not None}
        if query:
            url += f"?{urlencode(query)}"
        return url

    def to_obscured_string(self) -> str:
        return self.to_string()

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"FilesRequestUrl({self.to_string()!r})"


def format_file_name(name: str) -> str:
    """Ensure a file name carries the ``files/`` prefix."""
    return name if name.startswith("files/") else f"files/{name}"


def parse_file_id(name: str) -> str:
    return name[len("files/"):] if name.startswith("files/") else name


def build_multipart_body(
    metadata: FileMetadata, data: bytes, boundary: str
) -> bytes:
    """Encode a multipart/related body of JSON metadata followed by the file bytes."""
    metadata_json = json.dumps({"file": metadata.model_dump(exclude_none=True)})
    head = (
        f"--{boundary}\r\n"
        f"Content-Type: application/json; charset=utf-8\r\n\r\n"
        f"{metadata_json}\r\n"
        f"--{boundary}\r\n"
        f"Content-Type: {metadata.mimeType}\r\n\r\n"
    )
    tail = f"\r\n--{boundary}--"
    return head.encode("utf-8") + data + tail.encode("utf-8")


class GoogleAIFileManager:
    """Upload, list, get and delete files stored by the service."""

    def __init__(
        self,
        api_key: str,
        request_options: RequestOptions | None = None,
        session: Any = None,
    ):
        self.api_key = api_key
        self.request_options = request_options or RequestOptions()
        self._session = session

    def request_url(
        self,
        task: FilesTask,
        file_id: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> FilesRequestUrl:
        return FilesRequestUrl(
            task=task,
            api_version=self.request_options.resolved_api_version(),
            base_url=self.request_options.resolved_base_url(),
            file_id=file_id,
            params=params or {},
        )

    def headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "x-goog-api-client": get_client_headers(),
            "x-goog-api-key": self.api_key,
        }
        headers.update(extra or {})
        return headers

    async def _request(
        self,
        url: FilesRequestUrl,
        headers: dict[str, str],
        body: str | bytes | None = None,
    ) -> Any:
        session = self._session if self._session is not None else await get_session()
        return await make_request(
            session, url, body, method=METHODS[url.task], headers=headers
        )

    async def upload_file(
        self, file_path: str | Path, metadata: FileMetadata | dict
    ) -> UploadFileResponse:
        """
        Upload a file from disk.

        Args:
            file_path: Path of the file to upload
            metadata: MIME type and optional name / display name

        Returns:
            The stored file record
        """
        metadata = FileMetadata.model_validate(metadata)
        if metadata.name:
            metadata = metadata.model_copy(update={"name": format_file_name(metadata.name)})
        data = Path(file_path).read_bytes()
        boundary = uuid.uuid4().hex
        url = self.request_url(FilesTask.UPLOAD)
        headers = self.headers(
            {
                "X-Goog-Upload-Protocol": "multipart",
                "Content-Type": f"multipart/related; boundary={boundary}",
            }
        )
        logger.info(f"Uploading {file_path} ({len(data)} bytes, {metadata.mimeType})")
        response = await self._request(
            url, headers, build_multipart_body(metadata, data, boundary)
        )
        return parse_response(read_json(response, url), UploadFileResponse, url)

    async def list_files(
        self, params: ListParams | dict | None = None
    ) -> ListFilesResponse:
        params = ListParams.model_validate(params or {})
        url = self.request_url(FilesTask.LIST, params=params.model_dump(exclude_none=True))
        response = await self._request(url, self.headers({"Content-Type": "application/json"}))
        return parse_response(read_json(response, url), ListFilesResponse, url)

    async def get_file(self, file_id: str) -> FileRecord:
        url = self.request_url(FilesTask.GET, file_id=parse_file_id(file_id))
        response = await self._request(url, self.headers({"Content-Type": "application/json"}))
        return parse_response(read_json(response, url), FileRecord, url)

    async def delete_file(self, file_id: str) -> None:
        url = self.request_url(FilesTask.DELETE, file_id=parse_file_id(file_id))
        await self._request(url, self.headers({"Content-Type": "application/json"}))
        logger.info(f"Deleted file {file_id}")
