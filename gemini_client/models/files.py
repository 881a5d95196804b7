"""Models for the file storage endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class FileMetadata(BaseModel):
    """Metadata sent along with an uploaded file."""

    mimeType: str = Field(..., description="MIME type of the file")
    name: str | None = Field(default=None, description="Resource name, files/<id>")
    displayName: str | None = Field(default=None, description="Human readable name")


class FileRecord(BaseModel):
    """A file stored by the service."""

    model_config = ConfigDict(extra="allow")

    name: str | None = Field(default=None, description="Resource name")
    displayName: str | None = Field(default=None, description="Human readable name")
    mimeType: str | None = Field(default=None, description="MIME type")
    sizeBytes: str | None = Field(default=None, description="Size in bytes")
    createTime: str | None = Field(default=None, description="Creation timestamp")
    updateTime: str | None = Field(default=None, description="Last update timestamp")
    expirationTime: str | None = Field(default=None, description="Expiry timestamp")
    sha256Hash: str | None = Field(default=None, description="Base64 SHA-256 hash")
    uri: str | None = Field(default=None, description="URI to reference in prompts")
    state: str | None = Field(default=None, description="Processing state")


class UploadFileResponse(BaseModel):
    file: FileRecord = Field(..., description="The uploaded file")


class ListFilesResponse(BaseModel):
    files: list[FileRecord] = Field(default_factory=list, description="Stored files")
    nextPageToken: str | None = Field(default=None, description="Token of the next page")


class ListParams(BaseModel):
    """Paging parameters for listing files."""

    pageSize: int | None = Field(default=None, description="Maximum files per page")
    pageToken: str | None = Field(default=None, description="Page token to resume from")
