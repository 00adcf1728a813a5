# src/dcsim_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("DCSim Core package initialized.")

from .units import ureg, pint, Quantity
from .errors import ErrorCode, DCSimError, CircuitBuildError, SimulationRunError
from .components import (
    ComponentType, Terminal, Resistor, VoltageSource, CurrentSource, Ground, COMPONENT_REGISTRY
)
from .data_structures import Node, Circuit
from .parser import NetlistParser
from .circuit_builder import CircuitBuilder
from .simulation import (
    DCAnalysisOptions,
    NewtonRaphsonOptions,
    parse_solver_config,
    DCAnalysisResult,
    DCSweepResult,
    ConvergenceInfo,
    run_dc_analysis,
    run_dc_sweep,
    analyze_netlist,
)

__all__ = [
    # Units
    "ureg", "pint", "Quantity",
    # Errors
    "ErrorCode", "DCSimError",
    # Circuit model
    "ComponentType", "Terminal", "Resistor", "VoltageSource", "CurrentSource", "Ground",
    "COMPONENT_REGISTRY", "Node", "Circuit",
    # Parser & builder
    "NetlistParser", "CircuitBuilder",
    # Simulation
    "DCAnalysisOptions", "NewtonRaphsonOptions", "parse_solver_config",
    "DCAnalysisResult", "DCSweepResult", "ConvergenceInfo",
    "run_dc_analysis", "run_dc_sweep", "analyze_netlist",
    # Top-Level Errors (Actionable Diagnostics)
    "CircuitBuildError", "SimulationRunError",
]
