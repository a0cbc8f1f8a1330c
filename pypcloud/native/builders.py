"""Request builders for the pCloud API.

A builder is created by one of the ``PCloudClient`` factory methods. Creating
it validates the targeted file(s) and folder(s); a builder without a usable
target is never handed out, so addressing mistakes raise at the call site and
never cost a round trip. Optional parameters are set with chainable methods,
and ``execute()`` (or its alias ``get()``) sends the single request:

    >>> builder = client.copy_file("/a.txt", "/Backup").with_new_name("b.txt")
    >>> stat = await builder.overwrite(False).execute()
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar, cast

from .descriptors import (
    FileDescriptor,
    FileLike,
    FolderDescriptor,
    FolderLike,
    get_file_id,
    get_folder_id,
    require_file,
    require_folder,
)
from .models import (
    Diff,
    DownloadLink,
    Metadata,
    PCloudResponse,
    UserInfo,
    format_datetime,
)
from .results import NoIdentifierProvided

if TYPE_CHECKING:
    from typing import Self

    from .cloud import PCloudClient

T = TypeVar("T", bound=PCloudResponse)

QueryValue = str | int


def unix_time(value: datetime) -> int:
    """Convert a datetime to unix seconds, as expected by mtime and ctime."""
    return int(value.timestamp())


class RequestBuilder(Generic[T]):
    """Base class of all request builders.

    Subclasses declare the API endpoint, the HTTP method and the model the
    response is decoded into, and may add target parameters by overriding
    ``target_params``.
    """

    endpoint: ClassVar[str]
    method: ClassVar[str] = "GET"
    response_model: ClassVar[type[PCloudResponse]]

    def __init__(self, client: PCloudClient) -> None:
        self._client = client
        self._options: dict[str, QueryValue] = {}
        self._executed = False

    def _set(self, name: str, value: QueryValue | None) -> Self:
        """Set an option, or remove it when value is None."""
        if value is None:
            self._options.pop(name, None)
        else:
            self._options[name] = value
        return self

    def _flag(self, name: str, enabled: bool) -> Self:
        """Set a boolean option. pCloud treats any present value as true."""
        return self._set(name, "1" if enabled else None)

    def target_params(self) -> dict[str, QueryValue]:
        """Parameters addressing the source and target of the request."""
        return {}

    def params(self) -> dict[str, QueryValue]:
        """All query parameters of the request, credentials excluded."""
        return {**self.target_params(), **self._options}

    def _mark_executed(self) -> None:
        if self._executed:
            raise RuntimeError(f"{type(self).__name__} has already been executed")
        self._executed = True

    async def _send(
        self,
        endpoint: str,
        model: type[PCloudResponse],
        files: list[tuple[str, Any]] | None = None,
    ) -> Any:
        self._mark_executed()
        response = await self._client.send(
            self.method, endpoint, self.params(), files=files
        )
        return model.model_validate(response.json()).assert_ok()

    async def execute(self) -> T:
        """Send the request and return the decoded response.

        Raises:
            PCloudError: If the API returns a non-OK result code.
            httpx.HTTPError: On transport errors.
            RuntimeError: If the builder was already executed.
        """
        return cast(T, await self._send(self.endpoint, self.response_model))

    async def get(self) -> T:
        """Alias of execute()."""
        return await self.execute()


class FileRequestBuilder(RequestBuilder[T]):
    """Builder for an operation on a single file."""

    def __init__(self, client: PCloudClient, file_like: FileLike) -> None:
        super().__init__(client)
        self.file: FileDescriptor = require_file(file_like)

    def target_params(self) -> dict[str, QueryValue]:
        return self.file.params()


class RevisionedFileRequestBuilder(FileRequestBuilder[T]):
    """Builder for a file operation that can target a historical revision."""

    def __init__(self, client: PCloudClient, file_like: FileLike) -> None:
        super().__init__(client, file_like)
        self.with_revision(self.file.revision)

    def with_revision(self, revision: int | None) -> Self:
        """Target a specific revision of the file (None for the latest)."""
        return self._set("revisionid", revision)


class FolderRequestBuilder(RequestBuilder[T]):
    """Builder for an operation on a single folder."""

    def __init__(self, client: PCloudClient, folder_like: FolderLike) -> None:
        super().__init__(client)
        self.folder: FolderDescriptor = require_folder(folder_like)

    def target_params(self) -> dict[str, QueryValue]:
        return self.folder.params()


class UserInfoRequestBuilder(RequestBuilder[UserInfo]):
    """Get information about the logged in user."""

    endpoint = "userinfo"
    response_model = UserInfo


class DiffRequestBuilder(RequestBuilder[Diff]):
    """List updates of the user's folders and files."""

    endpoint = "diff"
    response_model = Diff

    def after_diff_id(self, value: int) -> Self:
        """Receive only changes since that diffid."""
        return self._set("diffid", value)

    def after(self, value: datetime) -> Self:
        """Receive only events generated after that time."""
        return self._set("after", format_datetime(value))

    def only_last(self, value: int) -> Self:
        """Return the last number of events with the highest diffids."""
        return self._set("last", value)

    def block(self, value: bool) -> Self:
        """Block until an event arrives. Works only with after_diff_id."""
        return self._flag("block", value)

    def limit(self, value: int) -> Self:
        """Return no more than limit entries."""
        return self._set("limit", value)


class Tree:
    """A set of files and folders, used by the zip operations.

    See https://docs.pcloud.com/structures/tree.html

    Members are always sent by numeric id, so adding a path costs one stat request.
    """

    def __init__(self, client: PCloudClient) -> None:
        self._client = client
        self.folder_id: int | None = None
        self.folder_ids: list[int] = []
        self.file_ids: list[int] = []
        self.exclude_folder_ids: list[int] = []
        self.exclude_file_ids: list[int] = []

    @property
    def is_empty(self) -> bool:
        return (
            self.folder_id is None and not self.folder_ids and not self.file_ids
        )

    def params(self) -> dict[str, QueryValue]:
        """Query parameters describing this tree."""
        params: dict[str, QueryValue] = {}
        if self.folder_id is not None:
            params["folderid"] = self.folder_id
        for name, ids in (
            ("folderids", self.folder_ids),
            ("fileids", self.file_ids),
            ("excludefolderids", self.exclude_folder_ids),
            ("excludefileids", self.exclude_file_ids),
        ):
            if ids:
                params[name] = ",".join(str(i) for i in ids)
        return params

    async def with_item(self, metadata: Metadata) -> Self:
        """Add a file or folder from its metadata."""
        if metadata.isfolder:
            return await self.with_folder(metadata)
        return await self.with_file(metadata)

    async def without_item(self, metadata: Metadata) -> Self:
        """Exclude a file or folder given its metadata."""
        if metadata.isfolder:
            return await self.without_folder(metadata)
        return await self.without_file(metadata)

    async def with_file(self, file_like: FileLike) -> Self:
        """Add a file to the root of the tree."""
        file_id, _ = await get_file_id(self._client, file_like)
        self.file_ids.append(file_id)
        return self

    async def without_file(self, file_like: FileLike) -> Self:
        """Exclude a file from the tree."""
        file_id, _ = await get_file_id(self._client, file_like)
        self.exclude_file_ids.append(file_id)
        return self

    async def with_folder(self, folder_like: FolderLike) -> Self:
        """Add a folder to the root of the tree."""
        self.folder_ids.append(await get_folder_id(self._client, folder_like))
        return self

    async def without_folder(self, folder_like: FolderLike) -> Self:
        """Exclude a folder (for example a subfolder of an added folder)."""
        self.exclude_folder_ids.append(await get_folder_id(self._client, folder_like))
        return self

    async def with_content_of_folder(self, folder_like: FolderLike) -> Self:
        """Put the contents of a folder, but not the folder itself, at the root."""
        self.folder_id = await get_folder_id(self._client, folder_like)
        return self


class ZipLinkRequestBuilder(RequestBuilder[DownloadLink]):
    """Create a link to download a tree as zip archive."""

    endpoint = "getziplink"
    response_model = DownloadLink

    def __init__(self, client: PCloudClient, tree: Tree) -> None:
        super().__init__(client)
        if tree.is_empty:
            raise NoIdentifierProvided("The tree contains no files or folders")
        self.tree = tree

    def target_params(self) -> dict[str, QueryValue]:
        return self.tree.params()

    def with_filename(self, value: str | None) -> Self:
        """Name of the zip archive offered to the browser."""
        return self._set("filename", value)

    def force_download(self, value: bool) -> Self:
        """Serve the archive with a download content type."""
        return self._flag("forcedownload", value)
