"""Result codes and the error taxonomy of the pCloud API.

Every pCloud response carries a numeric ``result`` field. Zero means success,
anything else is one of the documented error codes, which fall into families:

- 1xxx: the client misbehaved (missing or malformed parameters, login required)
- 2xxx: the operation is invalid for the current state (not found, not empty)
- 4xxx: rate limiting
- 5xxx: transient server errors

See https://docs.pcloud.com/errors/
"""

from __future__ import annotations

from enum import IntEnum
from typing import Protocol, TypeVar


class ResultCode(IntEnum):
    """Status codes returned by the pCloud API."""

    OK = 0
    LOG_IN_REQUIRED = 1000
    NO_FULL_PATH_OR_NAME_OR_FOLDER_ID_PROVIDED = 1001
    NO_FULL_PATH_OR_FOLDER_ID_PROVIDED = 1002
    NO_FILE_ID_OR_PATH_PROVIDED = 1004
    INVALID_FILE_DESCRIPTOR = 1007
    DATE_TIME_FORMAT_NOT_UNDERSTOOD = 1013
    NO_FULL_TO_PATH_OR_TO_NAME_AND_TO_FOLDER_ID_PROVIDED = 1016
    INVALID_FOLDER_ID = 1017
    INVALID_FILE_ID = 1018
    PROVIDE_AT_LEAST_TO_PATH_OR_TO_FOLDER_ID_OR_TO_NAME = 1037
    PROVIDE_URL = 1040
    LOGIN_FAILED = 2000
    INVALID_FILE_OR_FOLDER_NAME = 2001
    COMPONENT_OF_PARENT_DIRECTORY_DOES_NOT_EXIST = 2002
    ACCESS_DENIED = 2003
    FILE_OR_FOLDER_ALREADY_EXISTS = 2004
    DIRECTORY_DOES_NOT_EXIST = 2005
    FOLDER_IS_NOT_EMPTY = 2006
    CANNOT_DELETE_ROOT_FOLDER = 2007
    USER_OVER_QUOTA = 2008
    FILE_NOT_FOUND = 2009
    INVALID_PATH = 2010
    VERIFY_MAIL_ADDRESS = 2014
    CANNOT_PLACE_SHARED_FOLDER_INTO_SHARED_FOLDER = 2023
    CAN_ONLY_SHARE_OWN_FILES_OR_FOLDERS = 2026
    ACTIVE_SHARES_FOR_THIS_FOLDER = 2028
    CONNECTION_BROKEN = 2041
    CANNOT_RENAME_ROOT_FOLDER = 2042
    CANNOT_MOVE_FOLDER_INTO_ITS_SUBFOLDER = 2043
    INVALID_ACCESS_TOKEN = 2094
    TOO_MANY_LOGINS = 4000
    INTERNAL_ERROR = 5000
    INTERNAL_UPLOAD_ERROR = 5001
    WRITE_ERROR = 5003

    @property
    def description(self) -> str:
        """Human readable description of the code."""
        return _DESCRIPTIONS.get(self, self.name.replace("_", " ").capitalize())


_DESCRIPTIONS: dict[ResultCode, str] = {
    ResultCode.OK: "Everything ok - no error",
    ResultCode.LOG_IN_REQUIRED: "Log in required",
    ResultCode.NO_FULL_PATH_OR_NAME_OR_FOLDER_ID_PROVIDED: (
        "No full path or name/folderid provided."
    ),
    ResultCode.NO_FULL_PATH_OR_FOLDER_ID_PROVIDED: "No full path or folder id provided.",
    ResultCode.NO_FILE_ID_OR_PATH_PROVIDED: "No file id or file path provided",
    ResultCode.INVALID_FILE_DESCRIPTOR: "Invalid or closed file descriptor.",
    ResultCode.DATE_TIME_FORMAT_NOT_UNDERSTOOD: "Date time format not understood",
    ResultCode.NO_FULL_TO_PATH_OR_TO_NAME_AND_TO_FOLDER_ID_PROVIDED: (
        "No full topath or toname/tofolderid provided."
    ),
    ResultCode.INVALID_FOLDER_ID: "Invalid 'folderid' provided.",
    ResultCode.INVALID_FILE_ID: "Invalid 'fileid' provided.",
    ResultCode.PROVIDE_AT_LEAST_TO_PATH_OR_TO_FOLDER_ID_OR_TO_NAME: (
        "Please provide at least one of 'topath', 'tofolderid' or 'toname'."
    ),
    ResultCode.PROVIDE_URL: "Provide url",
    ResultCode.LOGIN_FAILED: "Log in failed",
    ResultCode.INVALID_FILE_OR_FOLDER_NAME: "Invalid file or folder name",
    ResultCode.COMPONENT_OF_PARENT_DIRECTORY_DOES_NOT_EXIST: (
        "A component of the parent directory does not exist"
    ),
    ResultCode.ACCESS_DENIED: "Access denied",
    ResultCode.FILE_OR_FOLDER_ALREADY_EXISTS: "File or folder already exists",
    ResultCode.DIRECTORY_DOES_NOT_EXIST: "Directory does not exist",
    ResultCode.FOLDER_IS_NOT_EMPTY: "Folder is not empty",
    ResultCode.CANNOT_DELETE_ROOT_FOLDER: "Cannot delete the root folder.",
    ResultCode.USER_OVER_QUOTA: "User over quota",
    ResultCode.FILE_NOT_FOUND: "File not found",
    ResultCode.INVALID_PATH: "Invalid path",
    ResultCode.VERIFY_MAIL_ADDRESS: (
        "Please verify your mail address to perform this action"
    ),
    ResultCode.CANNOT_PLACE_SHARED_FOLDER_INTO_SHARED_FOLDER: (
        "You are trying to place shared folder into another shared folder."
    ),
    ResultCode.CAN_ONLY_SHARE_OWN_FILES_OR_FOLDERS: (
        "You can only share your own files or folders"
    ),
    ResultCode.ACTIVE_SHARES_FOR_THIS_FOLDER: (
        "There are active shares or sharerequests for this folder."
    ),
    ResultCode.CONNECTION_BROKEN: "Connection broken",
    ResultCode.CANNOT_RENAME_ROOT_FOLDER: "Cannot rename the root folder.",
    ResultCode.CANNOT_MOVE_FOLDER_INTO_ITS_SUBFOLDER: (
        "Cannot move a folder to a subfolder of itself."
    ),
    ResultCode.INVALID_ACCESS_TOKEN: "Invalid 'access_token' provided.",
    ResultCode.TOO_MANY_LOGINS: "Too many logins",
    ResultCode.INTERNAL_ERROR: "Internal error",
    ResultCode.INTERNAL_UPLOAD_ERROR: "Internal upload error",
    ResultCode.WRITE_ERROR: "Write error. Try reopening the file.",
}


class PCloudError(Exception):
    """Base exception for every non-successful pCloud result.

    Attributes:
        code: The result code that caused the error.
    """

    def __init__(self, code: ResultCode, message: str | None = None) -> None:
        self.code = code
        super().__init__(message or f"{code.description} ({int(code)})")

    @staticmethod
    def for_code(code: ResultCode, message: str | None = None) -> PCloudError:
        """Create the error of the family the code belongs to."""
        if 1000 <= code < 2000:
            return ClientMisuseError(code, message)
        if 2000 <= code < 3000:
            return InvalidOperationError(code, message)
        if 4000 <= code < 5000:
            return RateLimitError(code, message)
        if 5000 <= code < 6000:
            return ServerError(code, message)
        return PCloudError(code, message)


class ClientMisuseError(PCloudError):
    """Raised for 1xxx codes: required parameters missing or malformed."""

    pass


class InvalidOperationError(PCloudError):
    """Raised for 2xxx codes: the operation is not valid for the target."""

    pass


class RateLimitError(PCloudError):
    """Raised for 4xxx codes."""

    pass


class ServerError(PCloudError):
    """Raised for 5xxx codes. Retrying later may succeed."""

    pass


class NoIdentifierProvided(ClientMisuseError):
    """Raised when a descriptor has neither an id nor a path."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(ResultCode.NO_FILE_ID_OR_PATH_PROVIDED, message)


class InvalidTarget(InvalidOperationError):
    """Raised when a resolved path points to a file instead of a folder, or vice versa."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(ResultCode.INVALID_PATH, message)


class SessionClosedError(ClientMisuseError):
    """Raised when a request is made through a released client or revoked session."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(ResultCode.LOG_IN_REQUIRED, message)


class HasResult(Protocol):
    result: ResultCode


R = TypeVar("R", bound=HasResult)


def assert_ok(response: R) -> R:
    """Return the response unchanged if its result is OK, raise otherwise.

    Raises:
        PCloudError: The family error carrying the response's result code.
    """
    if response.result == ResultCode.OK:
        return response
    raise PCloudError.for_code(ResultCode(response.result))
