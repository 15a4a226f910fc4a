"""Node model for the property graph."""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .types import SCALAR_TYPES, NodeId, Properties


def validate_properties(properties: Properties) -> Properties:
    """Check that a property map has string keys and scalar values.

    Shared by nodes and relationships.
    """
    for key, value in properties.items():
        if not isinstance(key, str) or not key:
            raise ValueError(f"Property keys must be non-empty strings, got {key!r}")
        if not isinstance(value, SCALAR_TYPES):
            raise ValueError(
                f"Property '{key}' must be a string, number, boolean or null, "
                f"got {type(value).__name__}"
            )
    return properties


class Node(BaseModel):
    """Node model representing a labeled entity in the property graph.

    Attributes:
        id: Unique identifier assigned by the store (or by a bulk importer)
        type: Primary label used by MATCH filters and statistics
        properties: Scalar key/value properties
        labels: Auxiliary classifications distinct from ``type``
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: NodeId
    type: str
    properties: Properties = Field(default_factory=dict)
    labels: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Validate that the node ID is not empty."""
        if not v or not v.strip():
            raise ValueError("Node ID cannot be empty")
        return v

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Validate node type is a non-empty string."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Node type must be a non-empty string")
        return v.strip()

    @field_validator("properties")
    @classmethod
    def validate_property_values(cls, v: Properties) -> Properties:
        return validate_properties(v)

    def to_dict(self) -> Dict[str, Any]:
        """Convert node to dictionary for JSON serialization."""
        return self.model_dump(by_alias=True, mode="json")

    def to_summary(self) -> Dict[str, Any]:
        """Compact form used in MATCH results."""
        return {
            "id": self.id,
            "type": self.type,
            "properties": dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        """Create node from dictionary."""
        return cls.model_validate(data)
