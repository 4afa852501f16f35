"""Unit tests for Socket and Thermometer."""

from __future__ import annotations

import pytest

from home_registry.devices import DEVICE_KINDS, Device, DeviceState, Socket, Thermometer, validate_device_name


class TestDeviceState:
    """Tests for on/off transitions."""

    def test_new_device_is_off(self):
        """Test devices start Off unless told otherwise."""
        device = Socket("s1")
        assert device.state is DeviceState.OFF
        assert device.is_on is False

    def test_initial_state_can_be_given(self):
        """Test state passed at construction, as a string or enum."""
        assert Socket("s1", state=DeviceState.ON).is_on is True
        assert Thermometer("t1", state="On").is_on is True  # type: ignore[arg-type]

    def test_turn_on_is_idempotent(self):
        """Test repeated turn_on leaves the device On."""
        device = Socket("s1")
        device.turn_on()
        device.turn_on()
        assert device.state is DeviceState.ON

    def test_turn_off_is_idempotent(self):
        """Test repeated turn_off leaves the device Off."""
        device = Socket("s1", state=DeviceState.ON)
        device.turn_off()
        device.turn_off()
        assert device.state is DeviceState.OFF

    def test_turn_off_after_on(self):
        """Test turn_off really switches the device off."""
        device = Thermometer("t1")
        device.turn_on()
        device.turn_off()
        assert device.is_on is False


class TestSocketReport:
    """Tests for the socket report format."""

    def test_report_when_off_shows_zero_power(self, counting_measure_factory):
        """Test an Off socket reports 0 and never samples its measurement."""
        measure = counting_measure_factory(55)
        device = Socket("s1", measure=measure)
        assert device.report() == "Socket name: s1\nstate: Off\ncurrent power: 0"
        assert measure.calls == 0

    def test_report_when_on_samples_once(self, counting_measure_factory):
        """Test an On socket samples its measurement exactly once per report."""
        measure = counting_measure_factory(55)
        device = Socket("s1", measure=measure, state=DeviceState.ON)
        assert device.report() == "Socket name: s1\nstate: On\ncurrent power: 55"
        assert measure.calls == 1

    def test_default_power_range(self):
        """Test the default power reading stays within [1, 100)."""
        for _ in range(200):
            assert 1 <= Socket.default_measure() < 100


class TestThermometerReport:
    """Tests for the thermometer report format."""

    def test_report_uses_thermometer_label(self):
        """Test the thermometer report is labelled as a thermometer."""
        device = Thermometer("t1", measure=lambda: -5, state=DeviceState.ON)
        assert device.report() == "Thermometer name: t1\nstate: On\ncurrent temperature: -5"

    def test_report_when_off(self):
        """Test an Off thermometer reports 0."""
        device = Thermometer("t1", measure=lambda: 30)
        assert device.report() == "Thermometer name: t1\nstate: Off\ncurrent temperature: 0"

    def test_default_temperature_range(self):
        """Test the default temperature stays within [-30, 40)."""
        for _ in range(200):
            assert -30 <= Thermometer.default_measure() < 40


class TestDeviceNames:
    """Tests for device name validation."""

    @pytest.mark.parametrize("name", ["", "two words", "tab\tname", "a::b", "a;;;b"])
    def test_invalid_names_rejected(self, name):
        """Test names the protocol cannot carry are rejected at construction."""
        with pytest.raises(ValueError, match="Device name"):
            Socket(name)

    def test_valid_name_returned(self):
        """Test a valid name passes through unchanged."""
        assert validate_device_name("kitchen-socket_2") == "kitchen-socket_2"

    def test_repr(self):
        """Test repr shows the type, name and state."""
        assert repr(Socket("s1")) == "Socket(name='s1', state=Off)"


class TestDeviceKinds:
    """Tests for the kind registry."""

    def test_kinds_map_to_classes(self):
        """Test layout kind names resolve to device classes."""
        assert DEVICE_KINDS == {"socket": Socket, "thermometer": Thermometer}

    def test_device_is_abstract(self):
        """Test the base class cannot be instantiated."""
        with pytest.raises(TypeError):
            Device("x")  # type: ignore[abstract]
