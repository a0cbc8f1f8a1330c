"""Request builders for folder operations.

See https://docs.pcloud.com/methods/folder/
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .builders import FolderRequestBuilder, QueryValue
from .descriptors import FolderDescriptor, FolderLike, require_folder
from .models import FileOrFolderStat, FolderRecursivelyDeleted

if TYPE_CHECKING:
    from typing import Self

    from .cloud import PCloudClient


class ListFolderRequestBuilder(FolderRequestBuilder[FileOrFolderStat]):
    """List the contents of a folder.

    The contents are returned in ``metadata.contents``.
    """

    endpoint = "listfolder"
    response_model = FileOrFolderStat

    def recursive(self, value: bool) -> Self:
        """Return the full directory tree."""
        return self._flag("recursive", value)

    def show_deleted(self, value: bool) -> Self:
        """Include deleted files and folders that can be undeleted."""
        return self._flag("showdeleted", value)

    def no_files(self, value: bool) -> Self:
        """Return only the folder structure."""
        return self._flag("nofiles", value)

    def no_shares(self, value: bool) -> Self:
        """Return only the user's own files and folders."""
        return self._flag("noshares", value)


class CreateFolderRequestBuilder(FolderRequestBuilder[FileOrFolderStat]):
    """Create a folder inside a parent folder.

    By default an existing folder of the same name is not an error.
    """

    response_model = FileOrFolderStat

    def __init__(self, client: PCloudClient, parent: FolderLike, name: str) -> None:
        super().__init__(client, parent)
        self.name = name
        self._if_not_exists = True

    @property
    def endpoint(self) -> str:  # type: ignore[override]
        if self._if_not_exists:
            return "createfolderifnotexists"
        return "createfolder"

    def if_not_exists(self, value: bool) -> Self:
        """Succeed if the folder already exists instead of failing."""
        self._if_not_exists = value
        return self

    def target_params(self) -> dict[str, QueryValue]:
        return {**self.folder.params(), "name": self.name}


class DeleteFolderRequestBuilder(FolderRequestBuilder[FileOrFolderStat]):
    """Delete a folder, either only if it is empty or with all its contents."""

    response_model = FileOrFolderStat

    async def delete_if_empty(self) -> FileOrFolderStat:
        """Delete the folder. Fails with FOLDER_IS_NOT_EMPTY otherwise."""
        return await self._send("deletefolder", FileOrFolderStat)

    async def delete_recursive(self) -> FolderRecursivelyDeleted:
        """Delete the folder and everything inside it."""
        return await self._send("deletefolderrecursive", FolderRecursivelyDeleted)

    async def execute(self) -> FileOrFolderStat:
        """Alias of delete_if_empty()."""
        return await self.delete_if_empty()


class CopyFolderRequestBuilder(FolderRequestBuilder[FileOrFolderStat]):
    """Copy a folder into another folder."""

    endpoint = "copyfolder"
    method = "POST"
    response_model = FileOrFolderStat

    def __init__(
        self, client: PCloudClient, folder_like: FolderLike, to_folder: FolderLike
    ) -> None:
        super().__init__(client, folder_like)
        self.to_folder: FolderDescriptor = require_folder(to_folder)

    def target_params(self) -> dict[str, QueryValue]:
        return {**self.folder.params(), **self.to_folder.params("tofolderid", "topath")}

    def with_new_name(self, value: str | None) -> Self:
        """Name of the copy."""
        return self._set("toname", value)

    def overwrite(self, value: bool) -> Self:
        """Overwrite existing files of the same name (the default)."""
        return self._flag("noover", not value)

    def skip_existing(self, value: bool) -> Self:
        """Skip files that already exist in the target."""
        return self._flag("skipexisting", value)

    def copy_content_only(self, value: bool) -> Self:
        """Copy only the contents of the folder, not the folder itself."""
        return self._flag("copycontentonly", value)


class MoveFolderRequestBuilder(FolderRequestBuilder[FileOrFolderStat]):
    """Move or rename a folder."""

    endpoint = "renamefolder"
    method = "POST"
    response_model = FileOrFolderStat

    def __init__(
        self, client: PCloudClient, folder_like: FolderLike, to_folder: FolderLike
    ) -> None:
        super().__init__(client, folder_like)
        self.to_folder: FolderDescriptor = require_folder(to_folder)

    def target_params(self) -> dict[str, QueryValue]:
        return {**self.folder.params(), **self.to_folder.params("tofolderid", "topath")}

    def with_new_name(self, value: str | None) -> Self:
        """New name of the folder."""
        return self._set("toname", value)
