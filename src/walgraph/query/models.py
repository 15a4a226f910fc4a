"""Result models for command batch execution."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..models import GraphStats


class CommandOutcome(BaseModel):
    """Outcome of one command in a batch.

    Attributes:
        command: The command text as executed
        type: Command kind (CREATE, MATCH, CLEAR, UNKNOWN)
        result: Kind-specific payload
        success: False only for unrecognized commands
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    command: str
    type: str
    result: Any = None
    success: bool = True


class ExecutionResult(BaseModel):
    """Result of a batch in which every command was processed."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    executed_commands: int = 0
    commands: List[CommandOutcome] = Field(default_factory=list)
    timestamp: str
    graph_stats: GraphStats

    @property
    def success(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")


class ExecutionErrorResult(BaseModel):
    """Result of a batch that stopped on an error.

    Commands applied before the failing one stay applied; the result still
    reports zero executed commands.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    error: str
    original_query: str
    timestamp: str
    executed_commands: int = 0

    @property
    def success(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-ready dictionary with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")
