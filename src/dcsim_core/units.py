# --- src/dcsim_core/units.py ---
import logging
from numbers import Real
from typing import Optional, Union

import pint

from .errors import DCSimError, ErrorCode

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.debug("Pint Unit Registry initialized.")


def to_base_magnitude(
    value: Union[Real, str],
    expected_unit: str,
    parameter_name: str,
    component_id: Optional[str] = None,
) -> float:
    """
    Converts a netlist parameter value to a plain float in `expected_unit`.

    Bare numbers (and numeric strings without a unit) are taken to already be
    in `expected_unit`. Strings such as ``"4.7 kohm"`` or ``"-2 mA"`` are parsed
    by pint and converted.

    Raises:
        DCSimError: INVALID_PARAMETER if the value is not a number, cannot be
            parsed, or has a dimension incompatible with `expected_unit`.
    """
    if isinstance(value, bool):
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message=f"Parameter '{parameter_name}' must be a number, got a boolean.",
            component_id=component_id,
        )
    if isinstance(value, Real):
        return float(value)
    if not isinstance(value, str):
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message=f"Parameter '{parameter_name}' must be a number or a quantity string, got {type(value).__name__}.",
            component_id=component_id,
        )

    if not value.strip():
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message=f"Parameter '{parameter_name}' cannot be an empty string.",
            component_id=component_id,
        )
    try:
        qty = ureg.Quantity(value.strip())
        if qty.dimensionless:
            return float(qty.to('dimensionless').magnitude)
        return float(qty.to(expected_unit).magnitude)
    except pint.DimensionalityError as e:
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message=f"Parameter '{parameter_name}' value '{value}' is not compatible with unit '{expected_unit}': {e}",
            component_id=component_id,
        ) from e
    except (pint.UndefinedUnitError, pint.errors.DefinitionSyntaxError, SyntaxError, ValueError, TypeError, AttributeError) as e:
        raise DCSimError(
            code=ErrorCode.INVALID_PARAMETER,
            message=f"Parameter '{parameter_name}' value '{value}' could not be parsed as a quantity: {e}",
            component_id=component_id,
        ) from e
