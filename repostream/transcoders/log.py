"""
Commit history transcoder.

git cannot quote fields of a custom log format, and commit text may
contain anything: quotes, braces, backslashes, newlines. So the record
template asks git to print two private tokens instead: a field-quote token
where a JSON double quote belongs and a record-separator token after every
record. Both tokens start with a NUL byte, which git refuses to store in
commit messages and identity headers, followed by a random per-invocation
nonce. Every NUL in the output therefore starts one of our tokens.

The transcoder turns "separator + newline + {" into ",{" (the boundary
between two records), escapes the text between quote tokens and puts real
double quotes where the quote tokens were.
"""

import secrets
from typing import Optional, Tuple

from .base import Emit, StreamTranscoder, escape_text

TOKEN_MARK = "\x00"

# (JSON key, git pretty-format placeholder)
COMMIT_FIELDS = (
    ("hash", "%H"),
    ("parents", "%P"),
    ("author", "%an"),
    ("authorEmail", "%ae"),
    ("authorDate", "%aI"),
    ("committer", "%cn"),
    ("committerEmail", "%ce"),
    ("committerDate", "%cI"),
    ("subject", "%s"),
    ("body", "%b"),
)


def _make_token(tag: str, nonce: Optional[str]) -> str:
    return TOKEN_MARK + tag + (nonce or secrets.token_hex(8))


class LogTranscoder(StreamTranscoder):
    """
    Transcodes `git log --format=<record_format>` output into a JSON array.

    Example:
        transcoder = LogTranscoder(chunks.append)
        args = GitClient.log_args("HEAD", transcoder.record_format)
    """

    prefix = "["
    suffix = "]"

    def __init__(self, emit: Emit, quote_nonce: Optional[str] = None, separator_nonce: Optional[str] = None):
        super().__init__(emit)
        self.quote_token = _make_token("q", quote_nonce)
        self.separator_token = _make_token("s", separator_nonce)
        self._boundary = self.separator_token + "\n{"

    @staticmethod
    def _format_token(token: str) -> str:
        # argv cannot carry NUL; git expands %x00 itself
        return "%x00" + token[len(TOKEN_MARK):]

    @property
    def record_format(self) -> str:
        """git pretty-format template producing one JSON-shaped record per commit."""
        quote = self._format_token(self.quote_token)
        members = ",".join(
            f"{quote}{key}{quote}:{quote}{placeholder}{quote}"
            for key, placeholder in COMMIT_FIELDS
        )
        return "{" + members + "}" + self._format_token(self.separator_token)

    def split(self, text: str) -> Tuple[str, str]:
        # Hold back from the last token start if a full boundary may not have arrived yet
        index = text.rfind(TOKEN_MARK)
        if index != -1 and len(text) - index < len(self._boundary):
            return text[:index], text[index:]
        return text, ""

    def transcode(self, text: str) -> str:
        text = text.replace(self._boundary, ",{")
        return '"'.join(escape_text(segment) for segment in text.split(self.quote_token))

    def transcode_final(self, text: str) -> str:
        # The last record has no sibling after it
        for trailer in (self.separator_token + "\n", self.separator_token):
            if text.endswith(trailer):
                text = text[:-len(trailer)]
                break
        return self.transcode(text) if text else ""
