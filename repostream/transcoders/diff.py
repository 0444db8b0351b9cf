"""
Commit diff transcoder.

The whole patch is one opaque JSON string value, so the only work is
escaping text as it streams.
"""

from .base import StreamTranscoder, escape_text


class DiffTranscoder(StreamTranscoder):
    """Wraps streamed patch text as {"diff": "..."}."""

    prefix = '{"diff":"'
    suffix = '"}'

    def transcode(self, text: str) -> str:
        return escape_text(text)
