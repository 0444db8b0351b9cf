"""
Streaming transcoder base class.

A transcoder sits between a subprocess's stdout and the caller's chunk
callback. It sees raw byte chunks with arbitrary boundaries and emits
structured text as soon as it can, holding back only the few trailing
characters that might belong to an incomplete delimiter or record.

Contract shared by every transcoder:
- the prefix is emitted with the first data chunk
- content is emitted in input order, never reordered
- close() emits the closing sequence exactly once; when no data ever
  arrived, a successful stream emits prefix + suffix (zero records) and a
  failed stream emits nothing (the operation never produced output)
- the concatenated output does not depend on where chunk boundaries fall
"""

import codecs
import json
from typing import Callable, Tuple, Union

Chunk = Union[str, bytes]
Emit = Callable[[Chunk], None]


def escape_text(text: str) -> str:
    """
    JSON string escaping without the surrounding quotes.

    Control characters, backslashes and double quotes are escaped and
    every non-ASCII code point becomes a \\uXXXX sequence. Escaping is done
    per character, so escape_text(a + b) == escape_text(a) + escape_text(b).
    """
    return json.dumps(text, ensure_ascii=True)[1:-1]


class StreamTranscoder:
    """
    Base class for text transcoders.

    Subclasses set prefix/suffix and implement split() and transcode().
    """

    prefix = ""
    suffix = ""

    def __init__(self, emit: Emit):
        self._emit = emit
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._tail = ""
        self.started = False
        self.closed = False

    def feed(self, chunk: bytes) -> None:
        """Consume one stdout chunk."""
        if self.closed:
            raise RuntimeError("Transcoder already closed")
        if not chunk:
            return
        if not self.started:
            self.started = True
            self._emit(self.prefix)

        text = self._tail + self._decoder.decode(chunk)
        ready, self._tail = self.split(text)
        if ready:
            out = self.transcode(ready)
            if out:
                self._emit(out)

    def close(self, success: bool = True) -> None:
        """Flush what is left and emit the closing sequence."""
        if self.closed:
            return
        self.closed = True

        if not self.started:
            if success:
                self._emit(self.prefix + self.suffix)
            return

        rest = self._tail + self._decoder.decode(b"", final=True)
        self._tail = ""
        out = self.transcode_final(rest) if rest else ""
        self._emit(out + self.suffix)

    def split(self, text: str) -> Tuple[str, str]:
        """
        Split decoded text into (ready, retained).

        The retained part is prepended to the next chunk.
        """
        return text, ""

    def transcode(self, text: str) -> str:
        raise NotImplementedError

    def transcode_final(self, text: str) -> str:
        """Transcode whatever is left at end of stream."""
        return self.transcode(text)
