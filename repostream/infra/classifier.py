"""
Classification of git failures.

git reports failures as a nonzero exit code plus free text on stderr.
DiagnosticBuffer collects that text while the process runs and
ErrorClassifier maps it onto an ErrorCode using literal prefix/suffix rules.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from ..domain.errors import ErrorCode

logger = logging.getLogger(__name__)


class DiagnosticBuffer:
    """
    Accumulates stderr chunks, keeping only the newest max_bytes.

    git writes its fatal line last, so trimming from the front never loses
    the line that decides the classification.
    """

    def __init__(self, max_bytes: int = 65536):
        self.max_bytes = max_bytes
        self._data = bytearray()

    def feed(self, chunk: bytes) -> None:
        self._data += chunk
        overflow = len(self._data) - self.max_bytes
        if overflow > 0:
            del self._data[:overflow]

    @property
    def text(self) -> str:
        return self._data.decode('utf-8', errors='replace')

    def __len__(self) -> int:
        return len(self._data)


@dataclass(frozen=True)
class ClassifierRule:
    """Matches one diagnostic line by literal prefix and/or suffix."""
    code: ErrorCode
    prefix: Optional[str] = None
    suffix: Optional[str] = None

    def matches(self, line: str) -> bool:
        if self.prefix is not None and not line.startswith(self.prefix):
            return False
        if self.suffix is not None and not line.endswith(self.suffix):
            return False
        return self.prefix is not None or self.suffix is not None


class ErrorClassifier:
    """
    Maps (exit code, diagnostic text) to an ErrorCode.

    Lines are checked from last to first; the first line matching any rule
    wins. Exit code 0 is success whatever stderr says.

    Example:
        classifier = ErrorClassifier(CLONE_RULES)
        code = classifier.classify(128, "fatal: unable to access 'x'...")
        # ErrorCode.INVALID_REMOTE_URL
    """

    def __init__(self, rules: Sequence[ClassifierRule]):
        self.rules: Tuple[ClassifierRule, ...] = tuple(rules)

    def classify(self, exit_code: int, diagnostics: str) -> Optional[ErrorCode]:
        """
        Classify a finished process.

        Returns:
            None on success, otherwise the matching ErrorCode
            (UNEXPECTED_ERROR when nothing matches)
        """
        if exit_code == 0:
            return None

        for line in reversed(diagnostics.splitlines()):
            line = line.strip()
            if not line:
                continue
            for rule in self.rules:
                if rule.matches(line):
                    logger.debug(f"Classified exit {exit_code} as {rule.code.value}: {line}")
                    return rule.code

        logger.debug(f"Unclassified exit {exit_code}: {diagnostics.strip()!r}")
        return ErrorCode.UNEXPECTED_ERROR

    @staticmethod
    def last_line(diagnostics: str) -> Optional[str]:
        """Return the last non-empty diagnostic line, used as the error message."""
        for line in reversed(diagnostics.splitlines()):
            if line.strip():
                return line.strip()
        return None


CLONE_RULES = (
    ClassifierRule(ErrorCode.REPOSITORY_ALREADY_EXISTS,
                   suffix="already exists and is not an empty directory."),
    ClassifierRule(ErrorCode.INVALID_REMOTE_URL, prefix="fatal: unable to access "),
    ClassifierRule(ErrorCode.INVALID_REMOTE_URL, prefix="fatal: repository "),
    ClassifierRule(ErrorCode.INVALID_REMOTE_URL,
                   prefix="fatal: Could not read from remote repository"),
    ClassifierRule(ErrorCode.INVALID_REMOTE_URL,
                   suffix="does not appear to be a git repository"),
)

LOG_RULES = (
    ClassifierRule(ErrorCode.REVISION_NOT_FOUND, prefix="fatal: bad revision"),
    ClassifierRule(ErrorCode.REVISION_NOT_FOUND, prefix="fatal: ambiguous argument"),
    ClassifierRule(ErrorCode.REVISION_NOT_FOUND, prefix="fatal: bad object"),
    ClassifierRule(ErrorCode.REVISION_NOT_FOUND, prefix="fatal: your current branch"),
)

TREE_RULES = (
    ClassifierRule(ErrorCode.REVISION_NOT_FOUND, prefix="fatal: Not a valid object name"),
    ClassifierRule(ErrorCode.PATH_NOT_A_DIRECTORY, prefix="fatal: not a tree object"),
)

DIFF_RULES = (
    ClassifierRule(ErrorCode.REVISION_NOT_FOUND, prefix="fatal: bad object"),
    ClassifierRule(ErrorCode.REVISION_NOT_FOUND, prefix="fatal: bad revision"),
    ClassifierRule(ErrorCode.REVISION_NOT_FOUND, prefix="fatal: ambiguous argument"),
)

BLOB_RULES = (
    ClassifierRule(ErrorCode.REVISION_NOT_FOUND, prefix="fatal: invalid object name"),
    ClassifierRule(ErrorCode.REVISION_NOT_FOUND, prefix="fatal: Not a valid object name"),
    ClassifierRule(ErrorCode.FILE_NOT_FOUND, prefix="fatal: path "),
    # cat-file on a tree or submodule entry
    ClassifierRule(ErrorCode.FILE_NOT_FOUND, prefix="fatal: git cat-file ", suffix=": bad file"),
)
