"""
Standard exit codes for repostream commands.

Following Unix/POSIX conventions for command-line tools.
"""
from typing import Optional

from .domain.errors import ErrorCode, RepoError

# Standard POSIX exit codes
SUCCESS = 0              # Successful termination
GENERAL_ERROR = 1        # General errors
USAGE_ERROR = 2          # Misuse of shell command (wrong arguments, etc.)

# Application-specific exit codes (64-113 are typically available)
NOT_FOUND = 64           # Root, repository, revision or path does not exist
CONFLICT = 65            # Target already exists
CONFIG_ERROR = 66        # Configuration file error
PERMISSION_ERROR = 67    # Insufficient permissions
NETWORK_ERROR = 68       # Remote could not be reached
TIMEOUT = 69             # Operation exceeded its time limit
INTERRUPTED = 130        # Terminated by Ctrl+C (SIGINT)

# Exit code mappings for domain errors
ERROR_CODE_EXIT_CODES = {
    ErrorCode.ROOT_NOT_FOUND: NOT_FOUND,
    ErrorCode.REPOSITORY_NOT_FOUND: NOT_FOUND,
    ErrorCode.REVISION_NOT_FOUND: NOT_FOUND,
    ErrorCode.PATH_NOT_A_DIRECTORY: NOT_FOUND,
    ErrorCode.FILE_NOT_FOUND: NOT_FOUND,
    ErrorCode.INVALID_IDENTIFIER: USAGE_ERROR,
    ErrorCode.INVALID_ARGUMENT: USAGE_ERROR,
    ErrorCode.REPOSITORY_ALREADY_EXISTS: CONFLICT,
    ErrorCode.INVALID_REMOTE_URL: NETWORK_ERROR,
    ErrorCode.TIMEOUT_EXCEEDED: TIMEOUT,
    ErrorCode.UNEXPECTED_ERROR: GENERAL_ERROR,
}

# Exit code mappings for common exceptions
EXCEPTION_EXIT_CODES = {
    'FileNotFoundError': GENERAL_ERROR,
    'PermissionError': PERMISSION_ERROR,
    'TimeoutError': TIMEOUT,
    'ValueError': USAGE_ERROR,
    'KeyboardInterrupt': INTERRUPTED,
}


def get_exit_code_for_exception(exc: Exception) -> int:
    """
    Get the appropriate exit code for an exception.

    Args:
        exc: The exception that occurred

    Returns:
        Appropriate exit code
    """
    if isinstance(exc, RepoError):
        return ERROR_CODE_EXIT_CODES.get(exc.code, GENERAL_ERROR)
    if isinstance(exc, CommandError):
        return exc.exit_code
    exc_name = exc.__class__.__name__
    return EXCEPTION_EXIT_CODES.get(exc_name, GENERAL_ERROR)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message, CONFIG_ERROR)
        self.path = path
