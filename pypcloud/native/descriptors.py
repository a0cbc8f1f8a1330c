"""File and folder descriptors.

Every operation addresses its target through a descriptor: either a numeric id
(preferred) or an absolute path, for files optionally pinned to a revision.
Callers may hand in any of these instead of a descriptor:

    >>> to_file(1234)                    # by id
    >>> to_file("/Photos/cat.jpg")       # by path
    >>> to_file(("/Photos/cat.jpg", 3))  # by path, revision 3
    >>> to_file(stat.metadata)           # from previously fetched metadata
    >>> to_folder("/")                   # the root folder, always id 0

Converting never performs I/O. Resolving a path descriptor to a numeric id
needs one ``stat`` round trip and is done by ``resolve_file`` and
``resolve_folder``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Union

from .models import FileOrFolderStat, Metadata
from .results import (
    InvalidOperationError,
    InvalidTarget,
    NoIdentifierProvided,
    ResultCode,
)

if TYPE_CHECKING:
    from .cloud import PCloudClient

logger = logging.getLogger(__name__)

# The root folder has the same id for every account
ROOT_FOLDER_ID = 0
ROOT_FOLDER_PATH = "/"


@dataclass(frozen=True)
class FileDescriptor:
    """A file addressed by id or path, optionally pinned to a revision.

    When both an id and a path are set, the id wins.
    """

    file_id: int | None = None
    path: str | None = None
    revision: int | None = None

    @property
    def is_empty(self) -> bool:
        return self.file_id is None and self.path is None

    def with_revision(self, revision: int | None) -> FileDescriptor:
        return replace(self, revision=revision)

    def params(self, id_name: str = "fileid", path_name: str = "path") -> dict[str, int | str]:
        """Query parameters addressing this file (without the revision)."""
        if self.file_id is not None:
            return {id_name: self.file_id}
        if self.path is not None:
            return {path_name: self.path}
        raise NoIdentifierProvided(f"Empty file descriptor: {self}")

    def __str__(self) -> str:
        target = self.file_id if self.file_id is not None else self.path
        if target is None:
            return "[empty file descriptor]"
        if self.revision is not None:
            return f"{target}@{self.revision}"
        return str(target)


@dataclass(frozen=True)
class FolderDescriptor:
    """A folder addressed by id or path. When both are set, the id wins."""

    folder_id: int | None = None
    path: str | None = None

    def __post_init__(self) -> None:
        # The root folder is always addressed by id
        if self.folder_id is None and self.path == ROOT_FOLDER_PATH:
            object.__setattr__(self, "folder_id", ROOT_FOLDER_ID)
            object.__setattr__(self, "path", None)

    @property
    def is_empty(self) -> bool:
        return self.folder_id is None and self.path is None

    @property
    def is_root(self) -> bool:
        return self.folder_id == ROOT_FOLDER_ID

    def params(
        self, id_name: str = "folderid", path_name: str = "path"
    ) -> dict[str, int | str]:
        """Query parameters addressing this folder."""
        if self.folder_id is not None:
            return {id_name: self.folder_id}
        if self.path is not None:
            return {path_name: self.path}
        raise NoIdentifierProvided(f"Empty folder descriptor: {self}")

    def __str__(self) -> str:
        if self.folder_id is not None:
            return str(self.folder_id)
        if self.path is not None:
            return self.path
        return "[empty folder descriptor]"


FileTarget = Union[int, str, Metadata, FileOrFolderStat, FileDescriptor]
# A file and the revision to pin it to
FileLike = Union[FileTarget, tuple[FileTarget, int]]
FolderLike = Union[int, str, Metadata, FileOrFolderStat, FolderDescriptor]


def _check_id(value: int) -> int:
    # bool is an int subclass, but True is never meant as file id 1
    if isinstance(value, bool):
        raise TypeError("Expected a numeric id, got a bool")
    if value < 0:
        raise ValueError(f"Ids are never negative: {value}")
    return value


def to_file(file_like: FileLike) -> FileDescriptor:
    """Convert anything describing a file into a FileDescriptor.

    Raises:
        InvalidOperationError: INVALID_FILE_OR_FOLDER_NAME if the metadata describes a folder
            or the stat result is not usable.
        TypeError: For unsupported inputs.
    """
    if isinstance(file_like, FileDescriptor):
        return file_like
    if isinstance(file_like, tuple):
        if len(file_like) != 2:
            raise TypeError("Expected a (file, revision) pair")
        target, revision = file_like
        if isinstance(target, tuple):
            raise TypeError("Nested (file, revision) pairs are not supported")
        return to_file(target).with_revision(_check_id(revision))
    if isinstance(file_like, int):
        return FileDescriptor(file_id=_check_id(file_like))
    if isinstance(file_like, str):
        return FileDescriptor(path=file_like)
    if isinstance(file_like, Metadata):
        if file_like.isfolder:
            raise InvalidOperationError(
                ResultCode.INVALID_FILE_OR_FOLDER_NAME,
                f"'{file_like.name}' is a folder, not a file",
            )
        return FileDescriptor(file_id=file_like.fileid)
    if isinstance(file_like, FileOrFolderStat):
        if file_like.is_ok and file_like.metadata is not None:
            return to_file(file_like.metadata)
        raise InvalidOperationError(ResultCode.INVALID_FILE_OR_FOLDER_NAME)
    raise TypeError(f"Cannot describe a file with {type(file_like).__name__}")


def to_folder(folder_like: FolderLike) -> FolderDescriptor:
    """Convert anything describing a folder into a FolderDescriptor.

    Raises:
        InvalidOperationError: INVALID_PATH for relative paths or unusable stat results,
            INVALID_FILE_OR_FOLDER_NAME if the metadata describes a file.
        TypeError: For unsupported inputs.
    """
    if isinstance(folder_like, FolderDescriptor):
        return folder_like
    if isinstance(folder_like, int):
        return FolderDescriptor(folder_id=_check_id(folder_like))
    if isinstance(folder_like, str):
        if folder_like == ROOT_FOLDER_PATH:
            return FolderDescriptor(folder_id=ROOT_FOLDER_ID)
        if folder_like.startswith("/"):
            return FolderDescriptor(path=folder_like)
        raise InvalidOperationError(
            ResultCode.INVALID_PATH, f"Folder paths must be absolute: '{folder_like}'"
        )
    if isinstance(folder_like, Metadata):
        if not folder_like.isfolder:
            raise InvalidOperationError(
                ResultCode.INVALID_FILE_OR_FOLDER_NAME,
                f"'{folder_like.name}' is a file, not a folder",
            )
        return FolderDescriptor(folder_id=folder_like.folderid)
    if isinstance(folder_like, FileOrFolderStat):
        if folder_like.is_ok and folder_like.metadata is not None:
            return to_folder(folder_like.metadata)
        raise InvalidOperationError(ResultCode.INVALID_PATH)
    raise TypeError(f"Cannot describe a folder with {type(folder_like).__name__}")


def require_file(file_like: FileLike) -> FileDescriptor:
    """Like to_file, but an empty descriptor raises NoIdentifierProvided."""
    file = to_file(file_like)
    if file.is_empty:
        raise NoIdentifierProvided("No file id or path provided")
    return file


def require_folder(folder_like: FolderLike) -> FolderDescriptor:
    """Like to_folder, but an empty descriptor raises NoIdentifierProvided."""
    folder = to_folder(folder_like)
    if folder.is_empty:
        raise NoIdentifierProvided("No folder id or path provided")
    return folder


async def get_file_id(client: PCloudClient, file_like: FileLike) -> tuple[int, int | None]:
    """Return the numeric id and the revision (if any) of a file.

    Issues one stat request if the file is only known by its path.

    Raises:
        NoIdentifierProvided: If the descriptor is empty.
        InvalidTarget: If the path points to a folder.
    """
    file = require_file(file_like)
    if file.file_id is not None:
        return file.file_id, file.revision

    logger.debug("Resolving file id of %s", file.path)
    metadata = (await client.stat(FileDescriptor(path=file.path)).get()).metadata
    if metadata is None or metadata.isfolder or metadata.fileid is None:
        raise InvalidTarget(f"'{file.path}' is not a file")
    return metadata.fileid, file.revision


async def get_folder_id(client: PCloudClient, folder_like: FolderLike) -> int:
    """Return the numeric id of a folder.

    Issues one stat request if the folder is only known by a path other than the root.

    Raises:
        NoIdentifierProvided: If the descriptor is empty.
        InvalidTarget: If the path points to a file.
    """
    folder = require_folder(folder_like)
    if folder.folder_id is not None:
        return folder.folder_id

    logger.debug("Resolving folder id of %s", folder.path)
    metadata = (await client.stat(FileDescriptor(path=folder.path)).get()).metadata
    if metadata is None or not metadata.isfolder or metadata.folderid is None:
        raise InvalidTarget(f"'{folder.path}' is not a folder")
    return metadata.folderid


async def resolve_file(client: PCloudClient, file_like: FileLike) -> FileDescriptor:
    """Resolve a file to an id-only descriptor, keeping its revision."""
    file_id, revision = await get_file_id(client, file_like)
    return FileDescriptor(file_id=file_id, revision=revision)


async def resolve_folder(client: PCloudClient, folder_like: FolderLike) -> FolderDescriptor:
    """Resolve a folder to an id-only descriptor."""
    return FolderDescriptor(folder_id=await get_folder_id(client, folder_like))
