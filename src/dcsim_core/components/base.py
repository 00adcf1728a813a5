# src/dcsim_core/components/base.py

from abc import ABC, abstractmethod
import logging
import math
from typing import ClassVar, Dict, Tuple, Type

from ..errors import DCSimError, ErrorCode
from .base_enums import ComponentType


logger = logging.getLogger(__name__)


class ComponentBase(ABC):
    """
    Shared shape of every circuit element.

    Concrete elements are frozen dataclasses that mix this class in. It holds
    no state of its own: only the class-level declarations the CircuitBuilder
    and the registry need (type tag, node count, parameter units) and the
    small validation helpers used by the constructors. Analysis code never
    calls methods on components to stamp them; it dispatches on `type_tag`.
    """
    type_tag: ClassVar[ComponentType]

    #: Whether the element's current is a linear function of its terminal voltages.
    is_linear: ClassVar[bool] = True

    @classmethod
    def declare_parameters(cls) -> Dict[str, str]:
        """Parameter names accepted from a netlist and the unit each is expressed in."""
        return {}

    @classmethod
    def declare_node_fields(cls) -> Tuple[str, ...]:
        """Constructor fields receiving the netlist node ids, in netlist order."""
        return ("pos_node", "neg_node")

    @classmethod
    def declare_node_count(cls) -> int:
        """Number of node ids the element must be connected to."""
        return len(cls.declare_node_fields())

    @property
    @abstractmethod
    def node_ids(self) -> Tuple[str, ...]:
        """Node ids this element references, in terminal order."""
        ...

    # --- Construction-time validation helpers ---

    def _set(self, name: str, value) -> None:
        # Frozen dataclasses only allow attribute writes through object.__setattr__.
        object.__setattr__(self, name, value)

    def _require_identifier(self, attr: str, what: str) -> str:
        raw = getattr(self, attr)
        if not isinstance(raw, str) or not raw.strip():
            raise DCSimError(
                code=ErrorCode.INVALID_COMPONENT,
                message=f"{what} cannot be empty.",
                component_id=raw if attr == "id" and isinstance(raw, str) else getattr(self, "id", None),
            )
        trimmed = raw.strip()
        self._set(attr, trimmed)
        return trimmed

    def _require_finite(self, attr: str, what: str) -> float:
        raw = getattr(self, attr)
        try:
            if isinstance(raw, str):
                raise TypeError("strings are not numeric values")
            value = float(raw)
        except (TypeError, ValueError):
            raise DCSimError(
                code=ErrorCode.INVALID_PARAMETER,
                message=f"{what} must be a valid number, got {raw!r}.",
                component_id=self.id,
            ) from None
        if isinstance(raw, bool) or not math.isfinite(value):
            raise DCSimError(
                code=ErrorCode.INVALID_PARAMETER,
                message=f"{what} must be a finite number, got {raw!r}.",
                component_id=self.id,
            )
        self._set(attr, value)
        return value

    def __str__(self) -> str:
        return f"{type(self).__name__}('{self.id}')"


# --- Global Component Registry and Decorator ---

COMPONENT_REGISTRY: Dict[str, Type[ComponentBase]] = {}


def register_component(type_tag: ComponentType):
    """
    A class decorator registering an element class under its wire-format type
    string, making it available to the CircuitBuilder.
    """
    def decorator(cls: Type[ComponentBase]):
        if not issubclass(cls, ComponentBase):
            raise TypeError(f"Class {cls.__name__} must inherit from ComponentBase.")

        params = cls.declare_parameters()
        if not isinstance(params, dict) or not all(isinstance(k, str) and isinstance(v, str) for k, v in params.items()):
            raise TypeError(
                f"Component class '{cls.__name__}' violates API contract. "
                f"declare_parameters() must return a Dict[str, str], but returned: {params!r}."
            )
        node_fields = cls.declare_node_fields()
        if not isinstance(node_fields, tuple) or not node_fields or not all(isinstance(f, str) for f in node_fields):
            raise TypeError(
                f"Component class '{cls.__name__}' violates API contract. "
                f"declare_node_fields() must return a non-empty Tuple[str, ...], but returned: {node_fields!r}."
            )

        if type_tag.value in COMPONENT_REGISTRY:
            logger.warning(f"Component type '{type_tag.value}' is being redefined/overwritten.")
        cls.type_tag = type_tag
        COMPONENT_REGISTRY[type_tag.value] = cls
        logger.debug(f"Registered component type '{type_tag.value}' -> {cls.__name__}")
        return cls

    return decorator
