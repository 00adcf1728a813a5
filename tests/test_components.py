# tests/test_components.py
import math

import pytest

from dcsim_core.components import (
    COMPONENT_REGISTRY,
    ComponentBase,
    ComponentType,
    CurrentSource,
    Ground,
    Resistor,
    Terminal,
    VoltageSource,
)
from dcsim_core.errors import DCSimError, ErrorCode


class TestResistor:

    def test_valid_resistor(self):
        r = Resistor("R1", "a", "b", 1000.0)
        assert r.resistance == 1000.0
        assert r.conductance == pytest.approx(1e-3)
        assert r.type_tag == ComponentType.RESISTOR
        assert r.node_ids == ("a", "b")
        assert r.terminals == (Terminal("pos", "a"), Terminal("neg", "b"))

    def test_name_defaults_to_id(self):
        assert Resistor("R1", "a", "b", 10.0).name == "R1"
        assert Resistor("R1", "a", "b", 10.0, name="Load").name == "Load"

    def test_ids_are_trimmed(self):
        r = Resistor("  R1 ", " a ", "b  ", 10.0)
        assert r.id == "R1"
        assert r.node_ids == ("a", "b")

    def test_integer_resistance_is_stored_as_float(self):
        r = Resistor("R1", "a", "b", 50)
        assert isinstance(r.resistance, float)

    @pytest.mark.parametrize("value", [0.0, -1.0, 1e-4, 1e13])
    def test_out_of_range_resistance(self, value):
        with pytest.raises(DCSimError) as exc_info:
            Resistor("R1", "a", "b", value)
        assert exc_info.value.code == ErrorCode.INVALID_PARAMETER
        assert exc_info.value.component_id == "R1"

    @pytest.mark.parametrize("value", [math.nan, math.inf, "100", True, None])
    def test_non_numeric_resistance(self, value):
        with pytest.raises(DCSimError) as exc_info:
            Resistor("R1", "a", "b", value)
        assert exc_info.value.code == ErrorCode.INVALID_PARAMETER

    def test_boundary_resistances_are_accepted(self):
        assert Resistor("Rmin", "a", "b", 1e-3).resistance == 1e-3
        assert Resistor("Rmax", "a", "b", 1e12).resistance == 1e12

    def test_same_node_on_both_terminals(self):
        with pytest.raises(DCSimError) as exc_info:
            Resistor("R1", "a", " a", 100.0)
        assert exc_info.value.code == ErrorCode.INVALID_COMPONENT
        assert exc_info.value.node_id == "a"

    @pytest.mark.parametrize("comp_id", ["", "   ", None])
    def test_empty_id(self, comp_id):
        with pytest.raises(DCSimError) as exc_info:
            Resistor(comp_id, "a", "b", 100.0)
        assert exc_info.value.code == ErrorCode.INVALID_COMPONENT

    def test_empty_node(self):
        with pytest.raises(DCSimError) as exc_info:
            Resistor("R1", "", "b", 100.0)
        assert exc_info.value.code == ErrorCode.INVALID_COMPONENT

    def test_is_immutable(self):
        r = Resistor("R1", "a", "b", 100.0)
        with pytest.raises(AttributeError):
            r.resistance = 5.0


class TestSources:

    def test_voltage_source(self):
        v = VoltageSource("V1", "in", "0", -5)
        assert v.voltage == -5.0
        assert v.type_tag == ComponentType.VOLTAGE_SOURCE
        assert VoltageSource.declare_parameters() == {"voltage": "volt"}

    def test_zero_voltage_is_allowed(self):
        assert VoltageSource("V1", "a", "b", 0.0).voltage == 0.0

    def test_current_source(self):
        i = CurrentSource("I1", "0", "n1", 2e-3)
        assert i.current == 2e-3
        assert i.type_tag == ComponentType.CURRENT_SOURCE
        assert CurrentSource.declare_parameters() == {"current": "ampere"}

    @pytest.mark.parametrize("cls, field_value", [(VoltageSource, math.inf), (CurrentSource, math.nan)])
    def test_non_finite_source_values(self, cls, field_value):
        with pytest.raises(DCSimError) as exc_info:
            cls("S1", "a", "b", field_value)
        assert exc_info.value.code == ErrorCode.INVALID_PARAMETER

    def test_source_same_node(self):
        with pytest.raises(DCSimError) as exc_info:
            VoltageSource("V1", "x", "x", 1.0)
        assert exc_info.value.code == ErrorCode.INVALID_COMPONENT


class TestGround:

    def test_ground(self):
        g = Ground("GND", " 0 ")
        assert g.node_id == "0"
        assert g.node_ids == ("0",)
        assert g.terminals == (Terminal("gnd", "0"),)
        assert Ground.declare_node_count() == 1
        assert Ground.declare_parameters() == {}

    def test_ground_without_node(self):
        with pytest.raises(DCSimError) as exc_info:
            Ground("GND", "")
        assert exc_info.value.code == ErrorCode.INVALID_COMPONENT


class TestRegistry:

    def test_all_types_registered(self):
        assert COMPONENT_REGISTRY == {
            "resistor": Resistor,
            "voltage_source": VoltageSource,
            "current_source": CurrentSource,
            "ground": Ground,
        }

    def test_two_terminal_node_count(self):
        for cls in (Resistor, VoltageSource, CurrentSource):
            assert cls.declare_node_count() == 2

    def test_all_components_are_linear(self):
        assert all(cls.is_linear for cls in COMPONENT_REGISTRY.values())

    def test_registered_classes_are_concrete(self):
        for cls in COMPONENT_REGISTRY.values():
            assert not cls.__abstractmethods__

    def test_element_without_node_ids_cannot_be_instantiated(self):
        class Dangling(ComponentBase):
            pass

        with pytest.raises(TypeError):
            Dangling()
