"""Token protocol: request parsing, response formatting and line framing.

Public API:
- ``Command`` / ``CommandKind`` and ``parse_request``
- ``Response`` (format and parse)
- wire helpers ``encode_request`` / ``decode_request`` / ``encode_response`` / ``decode_response``
"""

from .commands import Command, CommandKind
from .request import parse_request
from .response import Response
from .wire import decode_request, decode_response, encode_request, encode_response

__all__ = [
    "Command",
    "CommandKind",
    "Response",
    "decode_request",
    "decode_response",
    "encode_request",
    "encode_response",
    "parse_request",
]
