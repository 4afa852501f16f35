"""Unit tests for HomeClient against a scripted connection."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from home_registry.client import HomeClient
from home_registry.exceptions import RemoteError, ResponseParseError


def scripted_streams(*replies: bytes) -> tuple[MagicMock, MagicMock]:
    reader = MagicMock()
    reader.readline = AsyncMock(side_effect=list(replies))
    writer = MagicMock()
    writer.write = MagicMock()
    writer.drain = AsyncMock()
    writer.close = MagicMock()
    writer.wait_closed = AsyncMock()
    writer.is_closing = MagicMock(return_value=False)
    return reader, writer


@pytest.mark.asyncio
async def test_get_device_names_splits_payload():
    """Test the name list is split on the name separator."""
    reader, writer = scripted_streams(b"Ok::socket1, thermo1\n")
    with patch("asyncio.open_connection", AsyncMock(return_value=(reader, writer))):
        async with HomeClient("127.0.0.1", 9871) as client:
            assert await client.get_device_names() == ["socket1", "thermo1"]
    writer.write.assert_called_once_with(b"get_device_names\n")
    writer.close.assert_called_once()


@pytest.mark.asyncio
async def test_empty_payloads_give_empty_lists():
    """Test an empty home lists no names and no reports."""
    reader, writer = scripted_streams(b"Ok::\n", b"Ok::\n")
    with patch("asyncio.open_connection", AsyncMock(return_value=(reader, writer))):
        async with HomeClient() as client:
            assert await client.get_device_names() == []
            assert await client.status_all() == []


@pytest.mark.asyncio
async def test_status_all_unescapes_reports():
    """Test escaped multi-line reports come back split and restored."""
    reader, writer = scripted_streams(
        b"Ok::Socket name: s1\\nstate: Off\\ncurrent power: 0;;;Thermometer name: t1\\nstate: Off\\ncurrent temperature: 0\n",
    )
    with patch("asyncio.open_connection", AsyncMock(return_value=(reader, writer))):
        async with HomeClient() as client:
            reports = await client.status_all()
    assert reports == [
        "Socket name: s1\nstate: Off\ncurrent power: 0",
        "Thermometer name: t1\nstate: Off\ncurrent temperature: 0",
    ]


@pytest.mark.asyncio
async def test_error_response_raises_remote_error():
    """Test Error responses surface their reason."""
    reader, writer = scripted_streams(b"Error::Device with name 'ghost' does not exist\n")
    with patch("asyncio.open_connection", AsyncMock(return_value=(reader, writer))):
        async with HomeClient() as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.turn_on("ghost")
    assert exc_info.value.reason == "Device with name 'ghost' does not exist"
    writer.write.assert_called_once_with(b"turn_on ghost\n")


@pytest.mark.asyncio
async def test_malformed_response():
    """Test garbage from the server is a ResponseParseError."""
    reader, writer = scripted_streams(b"HELLO\n")
    with patch("asyncio.open_connection", AsyncMock(return_value=(reader, writer))):
        async with HomeClient() as client:
            with pytest.raises(ResponseParseError):
                await client.turn_off("s1")


@pytest.mark.asyncio
async def test_server_closed_connection():
    """Test EOF instead of a response is a ConnectionError."""
    reader, writer = scripted_streams(b"")
    with patch("asyncio.open_connection", AsyncMock(return_value=(reader, writer))):
        async with HomeClient() as client:
            with pytest.raises(ConnectionError, match="closed the connection"):
                await client.status_device("s1")


@pytest.mark.asyncio
async def test_request_requires_connection():
    """Test calls before connect fail fast."""
    client = HomeClient()
    assert client.connected is False
    with pytest.raises(ConnectionError, match="not connected"):
        await client.get_device_names()
