"""Typed command variants produced by the command parser."""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Optional, Union

from ..models.types import Properties


class CommandKind(str, Enum):
    """Kind of a parsed command."""

    CREATE = "CREATE"
    MATCH = "MATCH"
    CLEAR = "CLEAR"
    UNKNOWN = "UNKNOWN"


DEFAULT_VARIABLE = "n"


@dataclass(frozen=True)
class CreateCommand:
    """``CREATE (var:Type {props})``: create one node."""

    kind: ClassVar[CommandKind] = CommandKind.CREATE

    text: str
    node_type: str
    variable: str = DEFAULT_VARIABLE
    properties: Properties = field(default_factory=dict)


@dataclass(frozen=True)
class MatchNodesCommand:
    """``MATCH (var:Type) RETURN var``: select nodes, optionally by type.

    ``match_all`` marks the ``MATCH (...) RETURN ...`` fallback shape, which
    returns every node and reports ``all`` as its return variable.
    """

    kind: ClassVar[CommandKind] = CommandKind.MATCH

    text: str
    variable: str = ""
    node_type: Optional[str] = None
    return_variable: str = "all"
    match_all: bool = False

    @property
    def pattern(self) -> str:
        if self.match_all:
            return "()"
        type_part = f":{self.node_type}" if self.node_type else ""
        return f"({self.variable}{type_part})"


@dataclass(frozen=True)
class MatchRelationshipsCommand:
    """``MATCH (a)-[r:TYPE]-(b)``: select relationships, optionally by type.

    Direction is ignored; the node variables are recorded but never filter.
    """

    kind: ClassVar[CommandKind] = CommandKind.MATCH

    text: str
    relationship_type: Optional[str] = None
    relationship_variable: str = ""
    source_variable: str = ""
    target_variable: str = ""
    return_variable: str = "relationships"

    @property
    def pattern(self) -> str:
        return f"()-[{self.relationship_type or ''}]-()"


@dataclass(frozen=True)
class ClearCommand:
    """``CLEAR``: wipe the graph. The executor performs the wipe."""

    kind: ClassVar[CommandKind] = CommandKind.CLEAR

    text: str


@dataclass(frozen=True)
class UnknownCommand:
    """Any line that fits no known shape."""

    kind: ClassVar[CommandKind] = CommandKind.UNKNOWN

    text: str


Command = Union[
    CreateCommand,
    MatchNodesCommand,
    MatchRelationshipsCommand,
    ClearCommand,
    UnknownCommand,
]
