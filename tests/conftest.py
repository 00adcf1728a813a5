# tests/conftest.py
"""
Shared fixtures and circuit factories for the DCSim Core test suite.

Circuit factories return fully built `Circuit` objects so individual tests
can focus on the behavior under test rather than on construction.
"""
import pytest

from dcsim_core.circuit_builder import CircuitBuilder
from dcsim_core.components import CurrentSource, Ground, Resistor, VoltageSource
from dcsim_core.data_structures import Circuit
from dcsim_core.parser import NetlistParser


# --- Circuit factories ---

def make_voltage_divider(v: float = 10.0, r_top: float = 1000.0, r_bottom: float = 1000.0) -> Circuit:
    """V1 (in -> 0), R1 (in -> mid), R2 (mid -> 0)."""
    return Circuit.build(
        [
            VoltageSource("V1", "in", "0", v),
            Resistor("R1", "in", "mid", r_top),
            Resistor("R2", "mid", "0", r_bottom),
        ],
        name="voltage_divider",
    )


def make_current_source_circuit(i: float = 1e-3, r: float = 1000.0) -> Circuit:
    """I1 (0 -> n1) driving R1 (n1 -> 0)."""
    return Circuit.build(
        [
            CurrentSource("I1", "0", "n1", i),
            Resistor("R1", "n1", "0", r),
        ],
        name="current_source_load",
    )


def make_mixed_sources_circuit(v: float = 5.0, i: float = 2e-3) -> Circuit:
    """
    Two-node ladder driven by a voltage source and a current source:
    V1 (a -> 0), R1 (a -> b) 1k, R2 (b -> 0) 2k, I1 (0 -> b).
    """
    return Circuit.build(
        [
            VoltageSource("V1", "a", "0", v),
            Resistor("R1", "a", "b", 1000.0),
            Resistor("R2", "b", "0", 2000.0),
            CurrentSource("I1", "0", "b", i),
            Ground("GND", "0"),
        ],
        name="mixed_sources",
    )


def make_floating_island_circuit() -> Circuit:
    """A grounded divider plus an R pair on nodes x, y with no path to ground."""
    return Circuit.build(
        [
            VoltageSource("V1", "in", "0", 10.0),
            Resistor("R1", "in", "0", 1000.0),
            Resistor("R2", "x", "y", 1000.0),
            Resistor("R3", "y", "x", 2000.0),
        ],
        name="floating_island",
    )


# --- Fixtures ---

@pytest.fixture
def voltage_divider() -> Circuit:
    return make_voltage_divider()


@pytest.fixture
def current_source_circuit() -> Circuit:
    return make_current_source_circuit()


@pytest.fixture
def mixed_sources_circuit() -> Circuit:
    return make_mixed_sources_circuit()


@pytest.fixture
def floating_island_circuit() -> Circuit:
    return make_floating_island_circuit()


@pytest.fixture
def netlist_parser() -> NetlistParser:
    return NetlistParser()


@pytest.fixture
def circuit_builder_instance() -> CircuitBuilder:
    return CircuitBuilder()


@pytest.fixture
def divider_netlist() -> dict:
    """The voltage divider in wire format."""
    return {
        "name": "Divider",
        "description": "10 V across two equal resistors",
        "ground": "0",
        "components": [
            {"id": "V1", "type": "voltage_source", "name": "Supply", "nodes": ["in", "0"],
             "parameters": {"voltage": 10, "sourceType": "dc"}},
            {"id": "R1", "type": "resistor", "name": "Top", "nodes": ["in", "mid"],
             "parameters": {"resistance": "1 kohm"}},
            {"id": "R2", "type": "resistor", "name": "Bottom", "nodes": ["mid", "0"],
             "parameters": {"resistance": 1000}},
            {"id": "GND", "type": "ground", "name": "Ground", "nodes": ["0"], "parameters": {}},
        ],
    }
