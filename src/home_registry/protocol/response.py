"""Response formatter and parser.

A response is one of::

    Ok                  success, no payload
    Ok::<payload>       success with a payload (possibly empty)
    Error::<reason>     failure

``::`` is reserved; neither payloads nor reasons may contain it. The
formatter does not escape, callers must keep it out of what they send.
"""

from __future__ import annotations

from dataclasses import dataclass

from home_registry.const import RESPONSE_SEPARATOR
from home_registry.exceptions import ResponseParseError

OK = "Ok"
ERROR = "Error"


@dataclass(frozen=True, slots=True)
class Response:
    """Result of executing one command.

    Attributes:
        success: Whether the command succeeded
        payload: Result text if success=True; None means a bare ``Ok``
        reason: Error reason if success=False (empty string if success=True)
    """

    success: bool
    payload: str | None = None
    reason: str = ""

    @classmethod
    def ok(cls, payload: str | None = None) -> Response:
        return cls(success=True, payload=payload)

    @classmethod
    def error(cls, reason: str) -> Response:
        return cls(success=False, reason=reason)

    def format(self) -> str:
        """Render to a response line, without the line terminator.

        Raises:
            ValueError: payload or reason contains the ``::`` separator
        """
        if not self.success:
            return _join(ERROR, self.reason)
        if self.payload is None:
            return OK
        return _join(OK, self.payload)

    @classmethod
    def parse(cls, line: str) -> Response:
        """Rebuild a Response from a formatted line.

        A trailing line terminator is ignored.

        Raises:
            ResponseParseError: the line is neither an Ok nor an Error response
        """
        text = line.removesuffix("\n").removesuffix("\r")
        head, separator, rest = text.partition(RESPONSE_SEPARATOR)
        if head == OK:
            return cls.ok(rest if separator else None)
        if head == ERROR:
            return cls.error(rest)
        raise ResponseParseError(text)


def _join(head: str, body: str) -> str:
    if RESPONSE_SEPARATOR in body:
        msg = f"{head} body must not contain {RESPONSE_SEPARATOR!r}"
        raise ValueError(msg)
    return f"{head}{RESPONSE_SEPARATOR}{body}"
