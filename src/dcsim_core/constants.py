# --- src/dcsim_core/constants.py ---
import logging

logger = logging.getLogger(__name__)

# --- Circuit Model Defaults ---

#: Node id used as the ground reference when a netlist does not name one.
DEFAULT_GROUND_NODE_ID: str = "0"

#: Accepted resistance range for a Resistor, in ohms (1 milliohm to 1 teraohm).
MIN_RESISTANCE_OHMS: float = 1.0e-3
MAX_RESISTANCE_OHMS: float = 1.0e12

# --- Numerical Constants for the Solvers ---

#: A pivot whose magnitude is at or below this fraction of the largest |entry| in
#: its original column marks the matrix as singular during LU factorization.
DEFAULT_PIVOT_TOLERANCE: float = 1.0e-13

#: Newton-Raphson defaults.
DEFAULT_MAX_ITERATIONS: int = 100
DEFAULT_ABSOLUTE_TOLERANCE: float = 1.0e-12
DEFAULT_RELATIVE_TOLERANCE: float = 1.0e-3
DEFAULT_DAMPING_FACTOR: float = 1.0

logger.debug("Defined core constants: ground id, resistance bounds, pivot and Newton-Raphson defaults")
