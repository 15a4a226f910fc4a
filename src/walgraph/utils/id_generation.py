"""ID generation utilities for nodes and relationships.

Store-assigned ids are random and carry a short prefix naming the kind of
element (``node_`` or ``rel_``). Ids supplied by bulk-import callers are used
verbatim and only checked for being non-empty strings.
"""

import uuid
from typing import Callable, Container

from ..exceptions import WalGraphError


class IDValidationError(ValueError):
    """Exception raised when ID validation fails."""
    pass


class IDCollisionError(WalGraphError):
    """Exception raised when no unused ID could be generated."""
    pass


NODE_PREFIX = "node"
RELATIONSHIP_PREFIX = "rel"

# Attempts before giving up on finding an unused random id
_MAX_ATTEMPTS = 8


class IDGenerator:
    """Random id generation for graph elements."""

    @staticmethod
    def generate_node_id() -> str:
        """Generate a fresh node ID.

        Returns:
            Node ID of the form ``node_<32 hex chars>``
        """
        return f"{NODE_PREFIX}_{uuid.uuid4().hex}"

    @staticmethod
    def generate_relationship_id() -> str:
        """Generate a fresh relationship ID.

        Returns:
            Relationship ID of the form ``rel_<32 hex chars>``
        """
        return f"{RELATIONSHIP_PREFIX}_{uuid.uuid4().hex}"

    @staticmethod
    def generate_unique(factory: Callable[[], str], taken: Container[str]) -> str:
        """Generate an ID from ``factory`` that is not in ``taken``.

        Args:
            factory: Zero-argument ID factory
            taken: Collection of IDs already in use

        Returns:
            An unused ID

        Raises:
            IDCollisionError: If no unused ID was produced
        """
        for _ in range(_MAX_ATTEMPTS):
            candidate = factory()
            if candidate not in taken:
                return candidate
        raise IDCollisionError(f"Could not generate an unused ID after {_MAX_ATTEMPTS} attempts")


class IDValidator:
    """Validation for caller-supplied IDs."""

    @staticmethod
    def validate_id(id_value: object) -> str:
        """Validate a caller-supplied ID.

        Args:
            id_value: ID to validate

        Returns:
            The ID unchanged

        Raises:
            IDValidationError: If the ID is not a non-blank string
        """
        if not isinstance(id_value, str) or not id_value.strip():
            raise IDValidationError(f"Invalid ID: {id_value!r}")
        return id_value
