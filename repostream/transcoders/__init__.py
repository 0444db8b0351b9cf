"""
Streaming transcoders: raw git stdout in, response chunks out.

- LogTranscoder: commit history as a JSON array
- TreeTranscoder: tree entries as a JSON array
- DiffTranscoder: commit patch as a JSON object
- BlobTranscoder: file content, raw bytes
"""

from .base import StreamTranscoder, escape_text
from .log import LogTranscoder, COMMIT_FIELDS
from .tree import TreeTranscoder, parse_tree_record
from .diff import DiffTranscoder
from .blob import BlobTranscoder

__all__ = [
    'StreamTranscoder',
    'escape_text',
    'LogTranscoder',
    'COMMIT_FIELDS',
    'TreeTranscoder',
    'parse_tree_record',
    'DiffTranscoder',
    'BlobTranscoder',
]
