"""Request builders for file operations.

See https://docs.pcloud.com/methods/file/
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from .builders import (
    FileRequestBuilder,
    FolderRequestBuilder,
    QueryValue,
    RequestBuilder,
    RevisionedFileRequestBuilder,
    unix_time,
)
from .descriptors import FileLike, FolderDescriptor, FolderLike, require_folder
from .models import (
    DownloadLink,
    FileChecksums,
    FileOrFolderStat,
    PublicFileLink,
    RevisionList,
    UploadedFile,
    format_datetime,
)
from .results import NoIdentifierProvided, ResultCode

if TYPE_CHECKING:
    from typing import Self

    from .cloud import PCloudClient


class FileStatRequestBuilder(RevisionedFileRequestBuilder[FileOrFolderStat]):
    """Get the metadata of a file or folder."""

    endpoint = "stat"
    response_model = FileOrFolderStat


class FileDeleteRequestBuilder(FileRequestBuilder[FileOrFolderStat]):
    """Delete a file."""

    endpoint = "deletefile"
    response_model = FileOrFolderStat


class FileLinkRequestBuilder(RevisionedFileRequestBuilder[DownloadLink]):
    """Get a download link for a file."""

    endpoint = "getfilelink"
    response_model = DownloadLink


class ChecksumFileRequestBuilder(RevisionedFileRequestBuilder[FileChecksums]):
    """Calculate the checksums of a file."""

    endpoint = "checksumfile"
    response_model = FileChecksums


class ListRevisionsRequestBuilder(FileRequestBuilder[RevisionList]):
    """List the revisions of a file."""

    endpoint = "listrevisions"
    response_model = RevisionList


class PublicFileLinkRequestBuilder(RevisionedFileRequestBuilder[PublicFileLink]):
    """Create a public link to a file."""

    endpoint = "getfilepublink"
    response_model = PublicFileLink

    def expire_link_after(self, value: datetime | None) -> Self:
        """Datetime when the link will stop working."""
        return self._set("expire", format_datetime(value) if value else None)

    def with_max_downloads(self, value: int | None) -> Self:
        """Maximum number of downloads for this link."""
        return self._set("maxdownloads", value)

    def with_max_traffic(self, value: int | None) -> Self:
        """Maximum traffic in bytes that this link will consume."""
        return self._set("maxtraffic", value)

    def with_short_link(self, value: bool) -> Self:
        """Also generate a short link."""
        return self._flag("shortlink", value)

    def with_password(self, value: str | None) -> Self:
        """Protect the link with a password."""
        return self._set("linkpassword", value)


class PublicFileDownloadRequestBuilder(RequestBuilder[DownloadLink]):
    """Get a download link for a file behind a public link code."""

    endpoint = "getpublinkdownload"
    response_model = DownloadLink

    def __init__(
        self, client: PCloudClient, code: str, file_id: int | None = None
    ) -> None:
        super().__init__(client)
        if not code:
            raise NoIdentifierProvided("No public link code provided")
        self.code = code
        self.file_id = file_id

    def target_params(self) -> dict[str, QueryValue]:
        params: dict[str, QueryValue] = {"code": self.code}
        if self.file_id is not None:
            params["fileid"] = self.file_id
        return params


class CopyFileRequestBuilder(RevisionedFileRequestBuilder[FileOrFolderStat]):
    """Copy a file into a folder.

    Give either a target folder and optionally a new name with
    with_new_name(), or the full new path of the file as target path.
    """

    endpoint = "copyfile"
    method = "POST"
    response_model = FileOrFolderStat

    def __init__(
        self, client: PCloudClient, file_like: FileLike, to_folder: FolderLike
    ) -> None:
        super().__init__(client, file_like)
        self.to_folder: FolderDescriptor = require_folder(to_folder)

    def target_params(self) -> dict[str, QueryValue]:
        return {**self.file.params(), **self.to_folder.params("tofolderid", "topath")}

    def with_new_name(self, value: str | None) -> Self:
        """Name of the copy."""
        return self._set("toname", value)

    def overwrite(self, value: bool) -> Self:
        """Overwrite an existing file of the same name (the default)."""
        return self._flag("noover", not value)

    def with_modification_time(self, value: datetime | None) -> Self:
        """Set the modification time of the copy."""
        return self._set("mtime", unix_time(value) if value else None)

    def with_creation_time(self, value: datetime | None) -> Self:
        """Set the creation time of the copy. Requires a modification time."""
        return self._set("ctime", unix_time(value) if value else None)


class MoveFileRequestBuilder(RevisionedFileRequestBuilder[FileOrFolderStat]):
    """Move or rename a file."""

    endpoint = "renamefile"
    method = "POST"
    response_model = FileOrFolderStat

    def __init__(
        self, client: PCloudClient, file_like: FileLike, to_folder: FolderLike
    ) -> None:
        super().__init__(client, file_like)
        self.to_folder: FolderDescriptor = require_folder(to_folder)

    def target_params(self) -> dict[str, QueryValue]:
        return {**self.file.params(), **self.to_folder.params("tofolderid", "topath")}

    def with_new_name(self, value: str | None) -> Self:
        """New name of the file."""
        return self._set("toname", value)


class UploadRequestBuilder(FolderRequestBuilder[UploadedFile]):
    """Upload one or more files into a folder.

    Partial uploads are discarded by default.
    """

    endpoint = "uploadfile"
    method = "POST"
    response_model = UploadedFile

    def __init__(self, client: PCloudClient, folder_like: FolderLike) -> None:
        super().__init__(client, folder_like)
        self.files: list[tuple[str, bytes | Any]] = []
        self.no_partial(True)

    def with_file(self, name: str, content: bytes | Any) -> Self:
        """Add a file to upload. The content is bytes or a binary file object."""
        self.files.append((name, content))
        return self

    def no_partial(self, value: bool) -> Self:
        """Do not save partially uploaded files."""
        return self._flag("nopartial", value)

    def rename_if_exists(self, value: bool) -> Self:
        """Rename the upload instead of overwriting a file of the same name."""
        return self._flag("renameifexists", value)

    def with_modification_time(self, value: datetime | None) -> Self:
        """Set the modification time of the uploaded files."""
        return self._set("mtime", unix_time(value) if value else None)

    def with_creation_time(self, value: datetime | None) -> Self:
        """Set the creation time of the uploaded files. Requires a modification time."""
        return self._set("ctime", unix_time(value) if value else None)

    async def execute(self) -> UploadedFile:
        """Upload the files. Without any file, nothing is sent."""
        if not self.files:
            self._mark_executed()
            return UploadedFile(result=ResultCode.OK, fileids=[], metadata=[])
        files = [("file", (name, content)) for name, content in self.files]
        return await self._send(self.endpoint, self.response_model, files=files)

    async def upload(self) -> UploadedFile:
        """Alias of execute()."""
        return await self.execute()
