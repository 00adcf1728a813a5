# src/dcsim_core/components/__init__.py
import logging
logger = logging.getLogger(__name__)

# Import base first to define registry and decorator
from .base import ComponentBase, COMPONENT_REGISTRY, register_component
from .base_enums import ComponentType, SourceType
# Import concrete elements to trigger registration
from .elements import (
    Terminal, Resistor, VoltageSource, CurrentSource, Ground, Component, SOURCE_TYPES
)

logger.debug(f"Available component types: {list(COMPONENT_REGISTRY.keys())}")

__all__ = [
    "ComponentBase",
    "COMPONENT_REGISTRY",
    "register_component",
    "ComponentType",
    "SourceType",
    "Terminal",
    "Resistor",
    "VoltageSource",
    "CurrentSource",
    "Ground",
    "Component",
    "SOURCE_TYPES",
]
