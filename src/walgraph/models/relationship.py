"""Relationship model for the property graph."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .node import validate_properties
from .types import NodeId, Properties, RelationshipId

DEFAULT_WEIGHT = 1.0


class Relationship(BaseModel):
    """Relationship model representing a directed, typed edge.

    Attributes:
        id: Unique identifier assigned by the store
        type: Relationship type (e.g., KNOWS, WORKS_AT)
        source_id: ID of the source node
        target_id: ID of the target node
        properties: Scalar key/value properties
        weight: Optional weight used by analytics (1.0 when absent)
        created_at: Creation timestamp
        updated_at: Last update timestamp
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: RelationshipId
    type: str
    source_id: NodeId
    target_id: NodeId
    properties: Properties = Field(default_factory=dict)
    weight: Optional[float] = None
    created_at: datetime
    updated_at: datetime

    @field_validator("id", "source_id", "target_id")
    @classmethod
    def validate_ids(cls, v: str) -> str:
        """Validate that IDs are not empty."""
        if not v or not v.strip():
            raise ValueError("ID cannot be empty")
        return v

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Validate relationship type is a non-empty string."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("Relationship type must be a non-empty string")
        return v.strip()

    @field_validator("weight")
    @classmethod
    def validate_weight(cls, v: Optional[float]) -> Optional[float]:
        """Validate that weight is positive when given."""
        if v is not None and v <= 0.0:
            raise ValueError(f"Weight must be positive, got {v}")
        return v

    @field_validator("properties")
    @classmethod
    def validate_property_values(cls, v: Properties) -> Properties:
        return validate_properties(v)

    @property
    def effective_weight(self) -> float:
        """Weight used by graph algorithms."""
        return self.weight if self.weight is not None else DEFAULT_WEIGHT

    @property
    def is_self_loop(self) -> bool:
        return self.source_id == self.target_id

    def to_dict(self) -> Dict[str, Any]:
        """Convert relationship to dictionary for JSON serialization."""
        return self.model_dump(by_alias=True, mode="json")

    def to_summary(self) -> Dict[str, Any]:
        """Compact form used in MATCH results."""
        return {
            "id": self.id,
            "type": self.type,
            "sourceId": self.source_id,
            "targetId": self.target_id,
            "properties": dict(self.properties),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relationship":
        """Create relationship from dictionary."""
        return cls.model_validate(data)
