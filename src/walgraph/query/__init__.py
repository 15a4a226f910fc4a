"""Command language: parsing and batch execution."""

from .commands import (
    ClearCommand,
    Command,
    CommandKind,
    CreateCommand,
    MatchNodesCommand,
    MatchRelationshipsCommand,
    UnknownCommand,
)
from .executor import QueryExecutor
from .models import CommandOutcome, ExecutionErrorResult, ExecutionResult
from .parser import CommandParser, parse_command
from .properties import parse_properties

__all__ = [
    "Command",
    "CommandKind",
    "CreateCommand",
    "MatchNodesCommand",
    "MatchRelationshipsCommand",
    "ClearCommand",
    "UnknownCommand",
    "CommandParser",
    "parse_command",
    "parse_properties",
    "QueryExecutor",
    "CommandOutcome",
    "ExecutionResult",
    "ExecutionErrorResult",
]
