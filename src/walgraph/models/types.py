"""Type definitions for graph models."""

from typing import Any, Dict, Union

# Type aliases for improved readability
NodeId = str
RelationshipId = str
PropertyValue = Union[str, int, float, bool, None]
Properties = Dict[str, Any]

SCALAR_TYPES = (str, int, float, bool, type(None))
