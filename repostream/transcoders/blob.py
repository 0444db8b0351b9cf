"""
Blob transcoder.

File content is returned as-is: bytes pass through undecoded and
unescaped, so binary files survive. Content-type labeling is left to the
caller.
"""

from .base import StreamTranscoder


class BlobTranscoder(StreamTranscoder):
    """Passes stdout bytes through verbatim."""

    def feed(self, chunk: bytes) -> None:
        if self.closed:
            raise RuntimeError("Transcoder already closed")
        if chunk:
            self.started = True
            self._emit(chunk)

    def close(self, success: bool = True) -> None:
        self.closed = True
