"""Unit tests for DeviceArena generational handles."""

from __future__ import annotations

import pytest

from home_registry.devices import Socket
from home_registry.exceptions import DeviceAlreadyOwnedError
from home_registry.registry import DeviceArena, DeviceHandle


@pytest.fixture
def arena() -> DeviceArena:
    return DeviceArena()


def test_insert_and_get(arena):
    """Test a fresh handle resolves to its device."""
    device = Socket("s1")
    handle = arena.insert(device)
    assert arena.get(handle) is device
    assert handle in arena
    assert len(arena) == 1


def test_remove_returns_device(arena):
    """Test remove hands the device back and frees the slot."""
    device = Socket("s1")
    handle = arena.insert(device)
    assert arena.remove(handle) is device
    assert len(arena) == 0
    assert handle not in arena


def test_stale_handle_does_not_resolve_to_reused_slot(arena):
    """Test a handle kept past removal never reaches the slot's next device."""
    stale = arena.insert(Socket("old"))
    arena.remove(stale)
    fresh = arena.insert(Socket("new"))

    assert fresh.index == stale.index
    assert fresh.generation == stale.generation + 1
    with pytest.raises(KeyError):
        arena.get(stale)
    assert arena.get(fresh).name == "new"


def test_double_remove_raises(arena):
    """Test removing through the same handle twice fails."""
    handle = arena.insert(Socket("s1"))
    arena.remove(handle)
    with pytest.raises(KeyError):
        arena.remove(handle)


def test_unknown_handle_raises(arena):
    """Test handles never issued by the arena are rejected."""
    with pytest.raises(KeyError):
        arena.get(DeviceHandle(index=7, generation=0))
    assert "not a handle" not in arena


def test_same_device_inserted_twice_rejected(arena):
    """Test a device already held by an arena cannot take a second slot."""
    device = Socket("s1")
    arena.insert(device)
    with pytest.raises(DeviceAlreadyOwnedError):
        arena.insert(device)
    with pytest.raises(DeviceAlreadyOwnedError):
        DeviceArena().insert(device)
    assert len(arena) == 1
    assert device.owner is arena


def test_iteration_skips_free_slots(arena):
    """Test iterating yields only live devices."""
    first = arena.insert(Socket("a"))
    arena.insert(Socket("b"))
    arena.remove(first)
    assert [device.name for device in arena] == ["b"]
