"""Pydantic models for pCloud API responses."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field, field_validator

from .results import ResultCode, assert_ok

if TYPE_CHECKING:
    from typing import Self

# pCloud encodes all timestamps in RFC 2822 style, e.g. "Sat, 24 Jul 2010 14:29:47 +0000"
PCLOUD_DATE_FORMAT = "%a, %d %b %Y %H:%M:%S %z"


def format_datetime(value: datetime) -> str:
    """Format a timestamp the way pCloud expects it in query parameters.

    Naive datetimes are taken as UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.strftime(PCLOUD_DATE_FORMAT)


def parse_datetime(value: object) -> object:
    """Parse pCloud formatted timestamps, pass anything else through."""
    if isinstance(value, str):
        return datetime.strptime(value, PCLOUD_DATE_FORMAT)
    return value


class PCloudResponse(BaseModel):
    """Base model for every decoded response. Carries the result code."""

    result: ResultCode = Field(default=ResultCode.OK, description="Result code")

    def assert_ok(self) -> Self:
        """Return self if the result is OK, raise the matching PCloudError otherwise."""
        return assert_ok(self)

    @property
    def is_ok(self) -> bool:
        """Check if the result is OK."""
        return self.result == ResultCode.OK


# =============================================================================
# File and Folder Metadata
# =============================================================================


class FileCategory(IntEnum):
    """Category of a file."""

    UNCATEGORIZED = 0
    IMAGE = 1
    VIDEO = 2
    AUDIO = 3
    DOCUMENT = 4
    ARCHIVE = 5


class Metadata(BaseModel):
    """Metadata of a file or folder.

    See https://docs.pcloud.com/structures/metadata.html
    """

    isfolder: bool = Field(..., description="Whether the object is a folder")
    name: str = Field(..., description="Name of the file or folder")
    id: str = Field(default="", description="Prefixed id, 'd' for folders and 'f' for files")
    parentfolderid: int | None = Field(
        default=None,
        description="Id of the folder the object resides in",
    )
    folderid: int | None = Field(default=None, description="Folder id (folders only)")
    fileid: int | None = Field(default=None, description="File id (files only)")
    ismine: bool = Field(default=True, description="Whether the user owns the object")
    isshared: bool = Field(default=False, description="Whether the object is shared")
    canread: bool | None = None
    canmodify: bool | None = None
    candelete: bool | None = None
    cancreate: bool | None = None
    userid: int | None = Field(default=None, description="Owner of a shared object")
    created: datetime | None = Field(default=None, description="Creation time")
    modified: datetime | None = Field(default=None, description="Modification time")
    icon: str | None = Field(default=None, description="Icon name, e.g. 'document'")
    category: FileCategory | None = Field(default=None, description="File category")
    thumb: bool = Field(default=False, description="Whether thumbnails can be created")
    size: int | None = Field(default=None, description="Size in bytes (files only)")
    contenttype: str | None = None
    hash: int | None = Field(default=None, description="Content hash (files only)")
    path: str | None = Field(default=None, description="Full path, if requested by path")
    isdeleted: bool | None = None
    deletedfileid: str | None = None
    contents: list[Metadata] = Field(
        default_factory=list,
        description="Folder contents, filled by listfolder",
    )

    parse_dates = field_validator("created", "modified", mode="before")(parse_datetime)

    @property
    def is_folder(self) -> bool:
        """Check if this item is a folder."""
        return self.isfolder

    @property
    def is_file(self) -> bool:
        """Check if this item is a file."""
        return not self.isfolder


class FileOrFolderStat(PCloudResponse):
    """Response of stat, listfolder, createfolder, copy and rename operations."""

    metadata: Metadata | None = None


class FolderRecursivelyDeleted(PCloudResponse):
    """Response of deletefolderrecursive."""

    deletedfiles: int | None = None
    deletedfolders: int | None = None


# =============================================================================
# Session and Account
# =============================================================================


class ApiServers(PCloudResponse):
    """Response of getapiserver. The best servers come first."""

    api: list[str] = Field(default_factory=list, description="JSON API hosts")
    binapi: list[str] = Field(default_factory=list, description="Binary API hosts")


class UserInfo(PCloudResponse):
    """Response of userinfo. Contains the session token when requested with getauth."""

    auth: str | None = Field(default=None, description="Session token")
    userid: int | None = None
    email: str | None = None
    emailverified: bool | None = None
    registered: datetime | None = None
    language: str | None = None
    premium: bool | None = None
    usedquota: int | None = None
    quota: int | None = None

    parse_dates = field_validator("registered", mode="before")(parse_datetime)


class LogoutResponse(PCloudResponse):
    """Response of logout."""

    auth_deleted: bool | None = None


# =============================================================================
# Links, Uploads and Checksums
# =============================================================================


class DownloadLink(PCloudResponse):
    """Response of getfilelink, getpublinkdownload and getziplink."""

    path: str | None = None
    expires: datetime | None = None
    hosts: list[str] = Field(default_factory=list)

    parse_dates = field_validator("expires", mode="before")(parse_datetime)

    @property
    def url(self) -> str | None:
        """URL on the first (best) host, None if the link is unusable."""
        if self.is_ok and self.hosts and self.path:
            return f"https://{self.hosts[0]}{self.path}"
        return None


class PublicFileLink(PCloudResponse):
    """Response of getfilepublink."""

    linkid: int | None = None
    code: str | None = None
    link: str | None = None
    shortcode: str | None = None
    shortlink: str | None = None
    metadata: Metadata | None = None
    created: datetime | None = None
    modified: datetime | None = None
    downloadenabled: bool | None = None
    downloads: int | None = None

    parse_dates = field_validator("created", "modified", mode="before")(parse_datetime)


class UploadedFile(PCloudResponse):
    """Response of uploadfile."""

    fileids: list[int] = Field(default_factory=list)
    metadata: list[Metadata] = Field(default_factory=list)


class FileChecksums(PCloudResponse):
    """Response of checksumfile. SHA-1 is always present, md5 only on US servers."""

    metadata: Metadata | None = None
    sha1: str | None = None
    md5: str | None = None
    sha256: str | None = None


class FileRevision(BaseModel):
    """A single revision of a file."""

    revisionid: int
    size: int
    hash: int
    created: datetime

    parse_dates = field_validator("created", mode="before")(parse_datetime)


class RevisionList(PCloudResponse):
    """Response of listrevisions."""

    metadata: Metadata | None = None
    revisions: list[FileRevision] = Field(default_factory=list)


# =============================================================================
# Diff
# =============================================================================


class DiffEvent(str, Enum):
    """Type of a diff event."""

    RESET = "reset"
    CREATE_FOLDER = "createfolder"
    DELETE_FOLDER = "deletefolder"
    MODIFY_FOLDER = "modifyfolder"
    CREATE_FILE = "createfile"
    MODIFY_FILE = "modifyfile"
    DELETE_FILE = "deletefile"
    REQUEST_SHARE_IN = "requestsharein"
    ACCEPTED_SHARE_IN = "acceptedsharein"
    DECLINED_SHARE_IN = "declinedsharein"
    DECLINED_SHARE_OUT = "declinedshareout"
    CANCELLED_SHARE_IN = "cancelledsharein"
    REMOVED_SHARE_IN = "removedsharein"
    MODIFIED_SHARE_IN = "modifiedsharein"
    MODIFY_USER_INFO = "modifyuserinfo"


class Share(BaseModel):
    """Share information attached to share related diff events."""

    folderid: int
    sharerequestid: int | None = None
    shareid: int | None = None
    sharename: str | None = None
    created: datetime | None = None
    expires: datetime | None = None
    canread: bool | None = None
    canmodify: bool | None = None
    candelete: bool | None = None
    cancreate: bool | None = None
    message: str | None = None

    parse_dates = field_validator("created", "expires", mode="before")(parse_datetime)


class DiffEntry(BaseModel):
    """A single entry of the diff event log."""

    time: datetime
    diffid: int
    event: DiffEvent
    metadata: Metadata | None = None
    share: Share | None = None

    parse_dates = field_validator("time", mode="before")(parse_datetime)


class Diff(PCloudResponse):
    """Response of diff."""

    diffid: int = 0
    entries: list[DiffEntry] = Field(default_factory=list)
