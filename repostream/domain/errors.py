"""
Domain errors for repostream.

Every failure an operation can report is one member of ErrorCode.
Errors are classified where they are detected and surfaced as RepoError;
nothing is retried.
"""

from enum import Enum
from typing import Dict, Any, Optional


class ErrorCode(Enum):
    """Closed set of failure kinds reported to callers."""
    ROOT_NOT_FOUND = "ROOT_NOT_FOUND"
    REPOSITORY_NOT_FOUND = "REPOSITORY_NOT_FOUND"
    INVALID_IDENTIFIER = "INVALID_IDENTIFIER"
    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    REVISION_NOT_FOUND = "REVISION_NOT_FOUND"
    PATH_NOT_A_DIRECTORY = "PATH_NOT_A_DIRECTORY"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    REPOSITORY_ALREADY_EXISTS = "REPOSITORY_ALREADY_EXISTS"
    INVALID_REMOTE_URL = "INVALID_REMOTE_URL"
    TIMEOUT_EXCEEDED = "TIMEOUT_EXCEEDED"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"


_DEFAULT_MESSAGES = {
    ErrorCode.ROOT_NOT_FOUND: "Repositories root directory does not exist",
    ErrorCode.REPOSITORY_NOT_FOUND: "Repository not found",
    ErrorCode.INVALID_IDENTIFIER: "Invalid repository identifier",
    ErrorCode.INVALID_ARGUMENT: "Invalid argument",
    ErrorCode.REVISION_NOT_FOUND: "Revision not found",
    ErrorCode.PATH_NOT_A_DIRECTORY: "Path is not a directory",
    ErrorCode.FILE_NOT_FOUND: "File not found",
    ErrorCode.REPOSITORY_ALREADY_EXISTS: "Repository already exists",
    ErrorCode.INVALID_REMOTE_URL: "Invalid remote repository URL",
    ErrorCode.TIMEOUT_EXCEEDED: "Timeout exceeded",
    ErrorCode.UNEXPECTED_ERROR: "Unexpected error",
}


class RepoError(Exception):
    """
    A classified failure of a repository operation.

    Attributes:
        code: The ErrorCode describing the failure
        message: Human readable detail (usually the git diagnostic line)
    """

    def __init__(self, code: ErrorCode, message: Optional[str] = None):
        self.code = code
        self.message = message or _DEFAULT_MESSAGES[code]
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"RepoError({self.code.value}, {self.message!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'errorCode': self.code.value,
            'message': self.message,
        }
