"""Request parser for the token protocol.

``parse_request`` is total: every input line yields a ``Command``. Lines that
cannot be understood produce an ERROR command with a reason instead of an
exception, so the dispatcher always has something to execute.
"""

from __future__ import annotations

from home_registry.devices import validate_device_name
from home_registry.exceptions import ProtocolError
from home_registry.logging_abstraction import get_logger

from .commands import DEVICE_COMMANDS, REQUEST_WORDS, Command

logger = get_logger(__name__)

EMPTY_REQUEST = "empty request"
MISSING_DEVICE_NAME = "missing device name"
UNKNOWN_COMMAND = "unknown command"
INVALID_DEVICE_NAME = "invalid device name"


def _tokenize(line: str) -> tuple[str, str | None]:
    """Split a request line into (command word, device name).

    Raises:
        ProtocolError: the line holds no tokens at all
    """
    tokens = line.split()
    if not tokens:
        raise ProtocolError(EMPTY_REQUEST, line)
    device_name = tokens[1] if len(tokens) > 1 else None
    return tokens[0].casefold(), device_name


def parse_request(line: str) -> Command:
    """Parse one request line, ``<command> [<device_name>]``.

    Tokens after the device name are ignored.

    Example:
        >>> parse_request("turn_on socket1")
        Command(kind=<CommandKind.TURN_ON: 'turn_on'>, device_name='socket1', reason='')
        >>> parse_request("turn_on").reason
        'missing device name'
    """
    try:
        word, device_name = _tokenize(line)
    except ProtocolError as e:
        logger.debug("Unparseable request", extra={"reason": e.reason, "line": e.line})
        return Command.error(e.reason)

    kind = REQUEST_WORDS.get(word)
    if kind is None:
        logger.debug("Unknown command word", extra={"word": word[:32]})
        return Command.error(UNKNOWN_COMMAND)

    if kind not in DEVICE_COMMANDS:
        return Command(kind)
    if device_name is None:
        return Command.error(MISSING_DEVICE_NAME)
    try:
        validate_device_name(device_name)
    except ValueError:
        return Command.error(INVALID_DEVICE_NAME)
    return Command(kind, device_name=device_name)
