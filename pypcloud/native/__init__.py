"""Native Python client for the pCloud API."""

from .auth import Session, SessionManager, SessionState
from .builders import (
    DiffRequestBuilder,
    RequestBuilder,
    Tree,
    UserInfoRequestBuilder,
    ZipLinkRequestBuilder,
)
from .cloud import PCloudClient, select_api_host
from .config import (
    DEFAULT_API_HOST,
    EU_API_HOST,
    ConfigError,
    PCloudConfig,
    load_config,
)
from .descriptors import (
    FileDescriptor,
    FileLike,
    FolderDescriptor,
    FolderLike,
    get_file_id,
    get_folder_id,
    resolve_file,
    resolve_folder,
    to_file,
    to_folder,
)
from .models import (
    ApiServers,
    Diff,
    DiffEntry,
    DiffEvent,
    DownloadLink,
    FileCategory,
    FileChecksums,
    FileOrFolderStat,
    FileRevision,
    FolderRecursivelyDeleted,
    LogoutResponse,
    Metadata,
    PCloudResponse,
    PublicFileLink,
    RevisionList,
    Share,
    UploadedFile,
    UserInfo,
)
from .results import (
    ClientMisuseError,
    InvalidOperationError,
    InvalidTarget,
    NoIdentifierProvided,
    PCloudError,
    RateLimitError,
    ResultCode,
    ServerError,
    SessionClosedError,
    assert_ok,
)

__all__ = [
    # Client
    "DEFAULT_API_HOST",
    "EU_API_HOST",
    "PCloudClient",
    "select_api_host",
    # Session
    "Session",
    "SessionManager",
    "SessionState",
    # Config
    "ConfigError",
    "PCloudConfig",
    "load_config",
    # Descriptors
    "FileDescriptor",
    "FileLike",
    "FolderDescriptor",
    "FolderLike",
    "get_file_id",
    "get_folder_id",
    "resolve_file",
    "resolve_folder",
    "to_file",
    "to_folder",
    # Builders
    "DiffRequestBuilder",
    "RequestBuilder",
    "Tree",
    "UserInfoRequestBuilder",
    "ZipLinkRequestBuilder",
    # Models
    "ApiServers",
    "Diff",
    "DiffEntry",
    "DiffEvent",
    "DownloadLink",
    "FileCategory",
    "FileChecksums",
    "FileOrFolderStat",
    "FileRevision",
    "FolderRecursivelyDeleted",
    "LogoutResponse",
    "Metadata",
    "PCloudResponse",
    "PublicFileLink",
    "RevisionList",
    "Share",
    "UploadedFile",
    "UserInfo",
    # Errors
    "ClientMisuseError",
    "InvalidOperationError",
    "InvalidTarget",
    "NoIdentifierProvided",
    "PCloudError",
    "RateLimitError",
    "ResultCode",
    "ServerError",
    "SessionClosedError",
    "assert_ok",
]
