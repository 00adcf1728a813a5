# src/dcsim_core/validation/issue_codes.py
import logging
from enum import Enum

logger = logging.getLogger(__name__)


class TopologyIssueCode(Enum):
    """
    Registry of topology issue codes and their message templates.
    Each enum member's value is a tuple: (code_str, message_template_str).
    """

    # --- Ground Issues (GND_...) ---
    GND_CONN_001 = ("GND_CONN_001", "Ground node '{node_id}' is not referenced by any component.")

    # --- Node Connectivity Issues (NODE_...) ---
    NODE_FLOAT_001 = ("NODE_FLOAT_001", "Node(s) {node_ids} have no resistive or voltage-source path to ground node '{ground_node_id}'.")
    NODE_CONN_001 = ("NODE_CONN_001", "Node '{node_id}' has only a single connection, to component '{component_id}'.")

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def template(self) -> str:
        return self.value[1]

    def format_message(self, **kwargs) -> str:
        """Formats the message template with provided keyword arguments."""
        try:
            return self.template.format(**kwargs)
        except KeyError as e:
            logger.error(f"Missing key {e} for formatting message template of {self.name} (code: {self.code}): '{self.template}'. Provided args: {kwargs}")
            return f"Error formatting message for {self.code}: Missing key {e}. Template: '{self.template}' Args: {kwargs}"
