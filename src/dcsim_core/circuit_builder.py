# src/dcsim_core/circuit_builder.py
"""
Defines the CircuitBuilder, which turns a parsed netlist document into an
immutable, simulation-ready `Circuit`.

For every component entry it resolves the type string through the component
registry, checks the node count and the required parameters the class
declares, converts parameter values (plain numbers or unit strings such as
"4.7 kohm") to base SI magnitudes with pint, and constructs the element; the
element's own constructor then enforces its field invariants. Finally
`Circuit.build` derives the node graph.

Failures are `DCSimError`s: INVALID_COMPONENT for an unknown type, a wrong
node count or an unsupported `sourceType`; INVALID_PARAMETER for a missing or
malformed parameter. `build_simulation_model` is the user-facing variant that
wraps any of them in a `CircuitBuildError` carrying the diagnostic report.
"""

import logging
from typing import Any, Dict, List

from .components.base import COMPONENT_REGISTRY
from .components.base_enums import SourceType
from .components.elements import SOURCE_TYPES, Component
from .data_structures import Circuit
from .errors import CircuitBuildError, DCSimError, DiagnosableError, ErrorCode, format_diagnostic_report
from .parser.raw_data import ParsedCircuitDocument, ParsedComponentData
from .units import to_base_magnitude


logger = logging.getLogger(__name__)

SOURCE_TYPE_PARAMETER = "sourceType"


class CircuitBuilder:
    """Synthesizes a `Circuit` from a `ParsedCircuitDocument`."""

    def build_circuit(self, document: ParsedCircuitDocument) -> Circuit:
        """
        Builds the circuit, raising the underlying `DCSimError` on failure.
        """
        logger.info(f"--- Starting circuit build for '{document.circuit_name}' ---")
        components: List[Component] = [self._build_component(entry) for entry in document.components]
        circuit = Circuit.build(
            components,
            ground_node_id=document.ground_node_id,
            name=document.circuit_name,
            circuit_id=document.circuit_id,
            description=document.description,
        )
        logger.info(f"--- Circuit build for '{circuit.name}' successful ({len(components)} components). ---")
        return circuit

    def build_simulation_model(self, document: ParsedCircuitDocument) -> Circuit:
        """
        User-facing build entry point: any failure surfaces as a single
        `CircuitBuildError` whose message is the diagnostic report.
        """
        try:
            return self.build_circuit(document)
        except DiagnosableError as e:
            diagnostic_report = e.get_diagnostic_report()
            raise CircuitBuildError(diagnostic_report) from e
        except Exception as e:
            report = format_diagnostic_report(
                error_type=f"An Unexpected Error Occurred ({type(e).__name__})",
                details=f"The circuit builder encountered an unexpected internal error: {str(e)}",
                suggestion="This may indicate a bug in DCSim Core. Please review the traceback.",
                context={'source_file': document.source_path} if document.source_path else {},
            )
            raise CircuitBuildError(report) from e

    def _build_component(self, entry: ParsedComponentData) -> Component:
        comp_id = entry.instance_id.strip()
        type_str = entry.component_type.strip()
        cls = COMPONENT_REGISTRY.get(type_str)
        if cls is None:
            raise DCSimError(
                code=ErrorCode.INVALID_COMPONENT,
                message=(
                    f"Component type '{type_str}' is not supported. "
                    f"Available types: {sorted(COMPONENT_REGISTRY.keys())}."
                ),
                component_id=comp_id,
            )

        node_fields = cls.declare_node_fields()
        if len(entry.nodes) != len(node_fields):
            raise DCSimError(
                code=ErrorCode.INVALID_COMPONENT,
                message=(
                    f"Component '{comp_id}' of type '{type_str}' must have exactly "
                    f"{len(node_fields)} node(s), got {len(entry.nodes)}."
                ),
                component_id=comp_id,
            )

        raw_params: Dict[str, Any] = dict(entry.raw_parameters_dict)
        source_type = raw_params.pop(SOURCE_TYPE_PARAMETER, None)
        if issubclass(cls, SOURCE_TYPES):
            self._check_source_type(comp_id, type_str, source_type)
        elif source_type is not None:
            raw_params[SOURCE_TYPE_PARAMETER] = source_type

        kwargs: Dict[str, Any] = dict(zip(node_fields, entry.nodes))
        declared = cls.declare_parameters()
        for param_name, unit in declared.items():
            raw_value = raw_params.get(param_name)
            if raw_value is None:
                raise DCSimError(
                    code=ErrorCode.INVALID_PARAMETER,
                    message=f"Component '{comp_id}' of type '{type_str}' requires the '{param_name}' parameter.",
                    component_id=comp_id,
                )
            kwargs[param_name] = to_base_magnitude(raw_value, unit, param_name, component_id=comp_id)

        undeclared = sorted(set(raw_params) - set(declared))
        if undeclared:
            logger.warning(
                f"Component '{comp_id}' ({type_str}) defines undeclared parameter(s) {undeclared}; they are ignored."
            )

        component = cls(id=comp_id, name=entry.name, **kwargs)
        logger.debug(f"Built component {component}.")
        return component

    @staticmethod
    def _check_source_type(comp_id: str, type_str: str, source_type: Any) -> None:
        if source_type is None:
            return
        if not isinstance(source_type, str) or source_type.strip().lower() != SourceType.DC.value:
            raise DCSimError(
                code=ErrorCode.INVALID_COMPONENT,
                message=f"Component '{comp_id}' ({type_str}) sourceType '{source_type}' is not supported; only 'dc' is.",
                component_id=comp_id,
            )
