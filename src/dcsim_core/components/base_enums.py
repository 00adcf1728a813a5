# src/dcsim_core/components/base_enums.py
from enum import Enum


class ComponentType(Enum):
    """
    The closed set of element kinds a circuit may contain. The value is the
    type string used by the netlist wire format.
    """
    RESISTOR = "resistor"
    VOLTAGE_SOURCE = "voltage_source"
    CURRENT_SOURCE = "current_source"
    GROUND = "ground"

    def __str__(self):
        return self.value


class SourceType(Enum):
    """Waveform kind of an independent source. Only DC is supported."""
    DC = "dc"
