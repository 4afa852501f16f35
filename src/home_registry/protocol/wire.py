"""Line framing between the TCP stream and the protocol layer.

Requests and responses travel as ``\\n``-terminated lines. Device reports are
multi-line, so before a response goes on the wire its backslashes and line
breaks are escaped (``\\`` → ``\\\\``, LF → ``\\n``, CR → ``\\r``) and the
receiving side reverses it. Requests are plain tokens and are not escaped.
"""

from __future__ import annotations

from home_registry.const import DEFAULT_ENCODING

LINE_TERMINATOR = b"\n"

_ESCAPES = {"\\": "\\\\", "\n": "\\n", "\r": "\\r"}
_UNESCAPES = {"\\": "\\", "n": "\n", "r": "\r"}


def escape(text: str) -> str:
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def unescape(text: str) -> str:
    """Reverse ``escape``. Unknown escapes and a trailing lone backslash are kept verbatim."""
    out: list[str] = []
    chars = iter(text)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        nxt = next(chars, None)
        if nxt is None:
            out.append("\\")
        elif nxt in _UNESCAPES:
            out.append(_UNESCAPES[nxt])
        else:
            out.append("\\" + nxt)
    return "".join(out)


def _strip_terminator(raw: bytes) -> str:
    text = raw.decode(DEFAULT_ENCODING, errors="replace")
    return text.removesuffix("\n").removesuffix("\r")


def encode_response(text: str) -> bytes:
    return escape(text).encode(DEFAULT_ENCODING) + LINE_TERMINATOR


def decode_response(raw: bytes) -> str:
    return unescape(_strip_terminator(raw))


def encode_request(text: str) -> bytes:
    """Raises ValueError if ``text`` spans more than one line."""
    if "\n" in text or "\r" in text:
        msg = "Request must be a single line"
        raise ValueError(msg)
    return text.encode(DEFAULT_ENCODING) + LINE_TERMINATOR


def decode_request(raw: bytes) -> str:
    return _strip_terminator(raw)
