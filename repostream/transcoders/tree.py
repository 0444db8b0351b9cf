"""
Tree listing transcoder.

Input is `git ls-tree -l -z` output: one record per entry,

    <mode> SP <type> SP <object hash> SP+ <size> TAB <name> NUL

where size is '-' for anything but blobs. With -z git never C-quotes
names, so the name is taken verbatim and JSON-escaped.
"""

import json
import logging
from typing import Any, Dict, Optional, Tuple

from .base import Emit, StreamTranscoder

logger = logging.getLogger(__name__)

RECORD_TERMINATOR = "\x00"


def parse_tree_record(record: str) -> Optional[Dict[str, Any]]:
    """
    Parse one ls-tree record.

    Returns:
        Dict with name, type, size, objHash and mode, or None if the
        record is malformed
    """
    meta, tab, name = record.partition("\t")
    if not tab:
        return None

    fields = meta.split()
    if len(fields) != 4:
        return None

    mode, obj_type, obj_hash, size = fields
    return {
        "name": name,
        "type": obj_type,
        "size": int(size) if size.isdigit() else None,
        "objHash": obj_hash,
        "mode": mode,
    }


class TreeTranscoder(StreamTranscoder):
    """Transcodes ls-tree records into a JSON array of entry objects."""

    prefix = "["
    suffix = "]"

    def __init__(self, emit: Emit):
        super().__init__(emit)
        self.count = 0

    def split(self, text: str) -> Tuple[str, str]:
        index = text.rfind(RECORD_TERMINATOR)
        if index == -1:
            return "", text
        return text[:index + 1], text[index + 1:]

    def transcode(self, text: str) -> str:
        parts = []
        for record in text.split(RECORD_TERMINATOR):
            if not record:
                continue
            entry = parse_tree_record(record)
            if entry is None:
                logger.warning(f"Skipping malformed ls-tree record: {record!r}")
                continue
            parts.append(("," if self.count else "") + json.dumps(entry))
            self.count += 1
        return "".join(parts)
