"""pCloud API client.

Example:
    >>> async with await PCloudClient.with_oauth("access-token") as client:
    ...     folder = await client.list_folder("/Photos").recursive(True).get()
    ...     for item in folder.metadata.contents:
    ...         print(item.name)

Every operation is a request builder returned by one of the client methods;
see ``builders.py``. Clients are cheap to clone: clones share the HTTP
connection pool and the session, which is revoked once the last clone is
closed.
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx

from .auth import Session, SessionManager, SessionState
from .builders import (
    DiffRequestBuilder,
    Tree,
    UserInfoRequestBuilder,
    ZipLinkRequestBuilder,
)
from .config import DEFAULT_API_HOST, DEFAULT_TIMEOUT, ConfigError, load_config
from .descriptors import (
    FileLike,
    FolderLike,
    get_file_id,
    get_folder_id,
)
from .files import (
    ChecksumFileRequestBuilder,
    CopyFileRequestBuilder,
    FileDeleteRequestBuilder,
    FileLinkRequestBuilder,
    FileStatRequestBuilder,
    ListRevisionsRequestBuilder,
    MoveFileRequestBuilder,
    PublicFileDownloadRequestBuilder,
    PublicFileLinkRequestBuilder,
    UploadRequestBuilder,
)
from .folders import (
    CopyFolderRequestBuilder,
    CreateFolderRequestBuilder,
    DeleteFolderRequestBuilder,
    ListFolderRequestBuilder,
    MoveFolderRequestBuilder,
)
from .models import ApiServers, DownloadLink, Metadata
from .results import (
    ClientMisuseError,
    InvalidOperationError,
    ResultCode,
    SessionClosedError,
)

if TYPE_CHECKING:
    from typing import Self

logger = logging.getLogger(__name__)

API_SERVER_ENDPOINT = "getapiserver"

# Keeps transport close tasks of dropped clients alive until they finish
_closing: set[asyncio.Task[None]] = set()


async def select_api_host(
    http: httpx.AsyncClient,
    host: str,
    params: dict[str, str] | None = None,
    headers: dict[str, str] | None = None,
) -> str:
    """Ask pCloud for the API host nearest to the caller.

    Args:
        http: The HTTP client to send the request with.
        host: The host to ask, also the fallback.
        params: Credentials to send as query parameters.
        headers: Credentials to send as headers.

    Returns:
        The best host as https URL, or ``host`` if discovery failed.
    """
    try:
        response = await http.get(
            f"{host}/{API_SERVER_ENDPOINT}", params=params, headers=headers
        )
        response.raise_for_status()
        servers = ApiServers.model_validate(response.json())
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("API server discovery failed, using %s: %s", host, e)
        return host

    if not servers.is_ok or not servers.api:
        logger.warning(
            "No API server offered (result %s), using %s", int(servers.result), host
        )
        return host

    best = f"https://{servers.api[0]}"
    logger.debug("Selected API server %s", best)
    return best


def _release_dropped_handle(manager: SessionManager, http: httpx.AsyncClient) -> None:
    # Runs when a client is garbage collected without aclose(), possibly
    # outside any event loop, so the logout has to block.
    if not manager.release():
        return
    if manager.state == SessionState.REVOKING:
        logger.debug("Last client handle dropped without aclose(), revoking session")
        manager.revoke()
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        logger.debug("No running event loop, HTTP connections are left to the interpreter")
        return
    task = loop.create_task(http.aclose())
    _closing.add(task)
    task.add_done_callback(_closing.discard)


class PCloudClient:
    """Client for the pCloud API.

    Use one of the constructors with_oauth(), with_username_and_password() or
    from_config() instead of creating the client directly.

    Attributes:
        api_host: The API host requests are sent to.
    """

    def __init__(
        self, api_host: str, http: httpx.AsyncClient, manager: SessionManager
    ) -> None:
        """Initialize a client handle.

        Args:
            api_host: API host URL, e.g. https://api.pcloud.com
            http: HTTP client, shared by all clones.
            manager: Session manager, shared by all clones.

        Raises:
            SessionClosedError: If the session has already been revoked.
        """
        manager.acquire()
        self.api_host = api_host.rstrip("/")
        self._http = http
        self._manager = manager
        self._finalizer = weakref.finalize(
            self, _release_dropped_handle, manager, http
        )

    @classmethod
    async def with_oauth(
        cls,
        access_token: str,
        host: str = DEFAULT_API_HOST,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> Self:
        """Create a client authenticating with an OAuth access token."""
        http = httpx.AsyncClient(timeout=timeout)
        manager = SessionManager.stateless(access_token)
        api_host = await select_api_host(
            http, host, headers={"Authorization": f"Bearer {access_token}"}
        )
        return cls(api_host, http, manager)

    @classmethod
    async def with_username_and_password(
        cls,
        username: str,
        password: str,
        host: str = DEFAULT_API_HOST,
        *,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> Self:
        """Log in and create a client using the new session token.

        The session is revoked when the last clone of the client is closed.

        Raises:
            InvalidOperationError: ACCESS_DENIED if the credentials were rejected.
            httpx.HTTPError: On transport errors during login.
        """
        http = httpx.AsyncClient(timeout=timeout)
        manager = SessionManager()
        try:
            token = await manager.login(http, host, username, password)
        except Exception:
            await http.aclose()
            raise
        api_host = await select_api_host(http, host, params={"auth": token})
        manager.activate(Session(token=token, endpoint=api_host))
        return cls(api_host, http, manager)

    @classmethod
    async def from_config(cls, config_path: str | Path | None = None) -> Self:
        """Create a client from the configuration file.

        An access token is preferred over username and password.

        Raises:
            ConfigError: If the configuration cannot be loaded.
        """
        config = load_config(config_path)
        if config.access_token:
            return await cls.with_oauth(
                config.access_token, config.host, timeout=config.timeout
            )
        if not (config.username and config.password):
            raise ConfigError("Config needs an access token or a username and password")
        return await cls.with_username_and_password(
            config.username, config.password, config.host, timeout=config.timeout
        )

    @property
    def session_manager(self) -> SessionManager:
        return self._manager

    @property
    def is_closed(self) -> bool:
        """Whether this handle has been closed."""
        return not self._finalizer.alive

    def clone(self) -> Self:
        """Create a new handle sharing the HTTP client and the session.

        Raises:
            SessionClosedError: If this handle has been closed or the session
                has already been revoked.
        """
        if self.is_closed:
            raise SessionClosedError("The client has been closed")
        return type(self)(self.api_host, self._http, self._manager)

    async def aclose(self) -> None:
        """Close this handle.

        Closing the last handle revokes a password session and closes the
        HTTP client. Closing a handle twice does nothing.
        """
        if self._finalizer.detach() is None:
            return
        if not self._manager.release():
            return
        try:
            await self._manager.revoke_async(self._http)
        finally:
            await self._http.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def send(
        self,
        method: str,
        endpoint: str,
        params: dict[str, Any],
        *,
        files: list[tuple[str, Any]] | None = None,
    ) -> httpx.Response:
        """Send an authenticated request to the API.

        Args:
            method: HTTP method.
            endpoint: API method name, e.g. "listfolder".
            params: Query parameters, without credentials.
            files: Multipart files, for uploads.

        Returns:
            The HTTP response.

        Raises:
            SessionClosedError: If this handle or the session has been closed.
            httpx.HTTPError: On transport errors and HTTP error statuses.
        """
        if self.is_closed:
            raise SessionClosedError("The client has been closed")

        query = dict(params)
        headers: dict[str, str] = {}
        self._manager.attach_credentials(query, headers)

        logger.debug("%s %s %s", method, endpoint, params)
        response = await self._http.request(
            method,
            f"{self.api_host}/{endpoint}",
            params=query,
            headers=headers,
            files=files,
        )
        response.raise_for_status()
        return response

    # =========================================================================
    # Account
    # =========================================================================

    def get_user_info(self) -> UserInfoRequestBuilder:
        return UserInfoRequestBuilder(self)

    def diff(self) -> DiffRequestBuilder:
        """List updates of the user's folders and files."""
        return DiffRequestBuilder(self)

    # =========================================================================
    # Files
    # =========================================================================

    def stat(self, file_like: FileLike) -> FileStatRequestBuilder:
        """Get the metadata of a file, or of a folder given by path."""
        return FileStatRequestBuilder(self, file_like)

    async def get_file_metadata(self, file_like: FileLike) -> Metadata:
        """Shortcut for the metadata part of stat()."""
        stat = await self.stat(file_like).get()
        if stat.metadata is None:
            raise InvalidOperationError(ResultCode.FILE_NOT_FOUND)
        return stat.metadata

    def delete_file(self, file_like: FileLike) -> FileDeleteRequestBuilder:
        return FileDeleteRequestBuilder(self, file_like)

    def get_download_link_for_file(self, file_like: FileLike) -> FileLinkRequestBuilder:
        return FileLinkRequestBuilder(self, file_like)

    def checksum_file(self, file_like: FileLike) -> ChecksumFileRequestBuilder:
        return ChecksumFileRequestBuilder(self, file_like)

    def get_public_link_for_file(
        self, file_like: FileLike
    ) -> PublicFileLinkRequestBuilder:
        return PublicFileLinkRequestBuilder(self, file_like)

    def get_public_download_link(
        self, code: str, file_id: int | None = None
    ) -> PublicFileDownloadRequestBuilder:
        """Get a download link for a public link code, or a file inside a public folder."""
        return PublicFileDownloadRequestBuilder(self, code, file_id)

    def list_file_revisions(self, file_like: FileLike) -> ListRevisionsRequestBuilder:
        return ListRevisionsRequestBuilder(self, file_like)

    def copy_file(
        self, file_like: FileLike, to_folder: FolderLike
    ) -> CopyFileRequestBuilder:
        return CopyFileRequestBuilder(self, file_like, to_folder)

    def move_file(
        self, file_like: FileLike, to_folder: FolderLike
    ) -> MoveFileRequestBuilder:
        return MoveFileRequestBuilder(self, file_like, to_folder)

    def upload_file_into_folder(self, folder_like: FolderLike) -> UploadRequestBuilder:
        """Upload files into a folder. Add the files with with_file()."""
        return UploadRequestBuilder(self, folder_like)

    async def download_link(self, link: DownloadLink) -> bytes:
        """Download the content behind a download link.

        The request goes to the link's host and carries no credentials.

        Raises:
            ClientMisuseError: PROVIDE_URL if the link has no usable URL.
            httpx.HTTPError: On transport errors and HTTP error statuses.
        """
        url = link.url
        if url is None:
            raise ClientMisuseError(ResultCode.PROVIDE_URL)
        logger.debug("Downloading %s", url)
        response = await self._http.get(url)
        response.raise_for_status()
        return response.content

    async def download_file(self, file_like: FileLike) -> bytes:
        """Fetch a download link for a file and download its content."""
        link = await self.get_download_link_for_file(file_like).get()
        return await self.download_link(link)

    async def get_file_id(self, file_like: FileLike) -> tuple[int, int | None]:
        """Return the numeric id and revision of a file. See descriptors.get_file_id."""
        return await get_file_id(self, file_like)

    # =========================================================================
    # Folders
    # =========================================================================

    def list_folder(self, folder_like: FolderLike) -> ListFolderRequestBuilder:
        return ListFolderRequestBuilder(self, folder_like)

    def create_folder(self, parent: FolderLike, name: str) -> CreateFolderRequestBuilder:
        """Create a folder named name inside parent."""
        return CreateFolderRequestBuilder(self, parent, name)

    def delete_folder(self, folder_like: FolderLike) -> DeleteFolderRequestBuilder:
        return DeleteFolderRequestBuilder(self, folder_like)

    def copy_folder(
        self, folder_like: FolderLike, to_folder: FolderLike
    ) -> CopyFolderRequestBuilder:
        return CopyFolderRequestBuilder(self, folder_like, to_folder)

    def move_folder(
        self, folder_like: FolderLike, to_folder: FolderLike
    ) -> MoveFolderRequestBuilder:
        return MoveFolderRequestBuilder(self, folder_like, to_folder)

    async def get_folder_id(self, folder_like: FolderLike) -> int:
        """Return the numeric id of a folder. See descriptors.get_folder_id."""
        return await get_folder_id(self, folder_like)

    # =========================================================================
    # Zip
    # =========================================================================

    def create_tree(self) -> Tree:
        """Start an empty tree of files and folders for get_zip_link()."""
        return Tree(self)

    def get_zip_link(self, tree: Tree) -> ZipLinkRequestBuilder:
        return ZipLinkRequestBuilder(self, tree)
