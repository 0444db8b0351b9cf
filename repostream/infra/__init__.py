"""
Infrastructure layer for repostream.

Contains abstractions for external systems:
- ProcessRunner: subprocess lifecycle with timeout
- ErrorClassifier: maps exit code + stderr to an ErrorCode
- GitClient: git argument construction and execution

These provide clean interfaces that can be mocked for testing.
"""

from .process import ProcessRunner, ProcessResult, ProcessState
from .classifier import (
    ErrorClassifier,
    ClassifierRule,
    DiagnosticBuffer,
    CLONE_RULES,
    LOG_RULES,
    TREE_RULES,
    DIFF_RULES,
    BLOB_RULES,
)
from .git_client import GitClient, GIT_DATA_FOLDER

__all__ = [
    'ProcessRunner',
    'ProcessResult',
    'ProcessState',
    'ErrorClassifier',
    'ClassifierRule',
    'DiagnosticBuffer',
    'CLONE_RULES',
    'LOG_RULES',
    'TREE_RULES',
    'DIFF_RULES',
    'BLOB_RULES',
    'GitClient',
    'GIT_DATA_FOLDER',
]
