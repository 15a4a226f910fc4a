"""Batch executor for the command language."""

from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Union

import structlog

from ..config import get_settings
from ..exceptions import ExecutionError, ParseError, WalGraphError
from ..storage.base import BaseGraphStore
from ..utils.logging import log_exception
from .commands import (
    ClearCommand,
    Command,
    CreateCommand,
    MatchNodesCommand,
    MatchRelationshipsCommand,
    UnknownCommand,
)
from .models import CommandOutcome, ExecutionErrorResult, ExecutionResult
from .parser import CommandParser

logger = structlog.get_logger(__name__)

CLEAR_MESSAGE = "Graph cleared successfully"


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class QueryExecutor:
    """Runs newline-separated command batches against a graph store.

    Commands run in order, each seeing the effects of the ones before it.
    The first parse, reference, constraint or validation error stops the
    batch. Nothing is rolled back: commands applied before the failure stay
    applied.
    """

    def __init__(
        self,
        store: BaseGraphStore,
        parser: Optional[CommandParser] = None,
        max_batch_lines: Optional[int] = None,
    ):
        """Initialize the executor.

        Args:
            store: Store the commands are applied to
            parser: Command parser; defaults to the built-in command shapes
            max_batch_lines: Largest accepted batch; falls back to
                ``WALGRAPH_MAX_BATCH_LINES``
        """
        self.store = store
        self.parser = parser or CommandParser()
        self.max_batch_lines = (
            get_settings().max_batch_lines if max_batch_lines is None else max_batch_lines
        )
        self.logger = logger.bind(component=self.__class__.__name__)

        self._handlers: Dict[type, Callable[[Any], CommandOutcome]] = {
            CreateCommand: self._execute_create,
            MatchNodesCommand: self._execute_match_nodes,
            MatchRelationshipsCommand: self._execute_match_relationships,
            ClearCommand: self._execute_clear,
            UnknownCommand: self._execute_unknown,
        }

    @staticmethod
    def split_batch(text: str) -> List[str]:
        """Split batch text on ``\\n`` into trimmed, non-blank lines in order."""
        return [line.strip() for line in text.split("\n") if line.strip()]

    def run(self, text: str) -> ExecutionResult:
        """Execute a batch, raising on the first error.

        Args:
            text: Newline-separated commands

        Returns:
            Per-command outcomes plus a statistics snapshot

        Raises:
            ExecutionError: Wrapping the error that stopped the batch
        """
        lines = self.split_batch(text)
        self.logger.info("Executing batch", lines=len(lines))

        try:
            if len(lines) > self.max_batch_lines:
                raise ParseError(
                    f"Batch has {len(lines)} commands, limit is {self.max_batch_lines}"
                )

            outcomes = []
            for line in lines:
                outcomes.append(self.execute_command(self.parser.parse(line)))
        except WalGraphError as e:
            raise ExecutionError(str(e), original_query=text, cause=e) from e

        executed = sum(1 for outcome in outcomes if outcome.success)
        result = ExecutionResult(
            executed_commands=executed,
            commands=outcomes,
            timestamp=_timestamp(),
            graph_stats=self.store.get_graph_stats(),
        )
        self.logger.info(
            "Batch executed",
            executed_commands=executed,
            failed_commands=len(outcomes) - executed,
        )
        return result

    def execute(self, text: str) -> Union[ExecutionResult, ExecutionErrorResult]:
        """Execute a batch, packaging a failure as an error result.

        Args:
            text: Newline-separated commands

        Returns:
            ``ExecutionResult`` on success, ``ExecutionErrorResult`` if the
            batch stopped on an error
        """
        try:
            return self.run(text)
        except ExecutionError as e:
            log_exception(self.logger, e.cause or e, "Batch execution failed")
            return ExecutionErrorResult(
                error=str(e),
                original_query=e.original_query,
                timestamp=e.timestamp,
            )

    def execute_command(self, command: Command) -> CommandOutcome:
        """Apply one parsed command to the store."""
        handler = self._handlers[type(command)]
        return handler(command)

    def _execute_create(self, command: CreateCommand) -> CommandOutcome:
        node_id = self.store.create_node(command.node_type, command.properties)
        return CommandOutcome(
            command=command.text,
            type=command.kind.value,
            result={
                "nodeId": node_id,
                "type": command.node_type,
                "properties": dict(command.properties),
                "variable": command.variable,
            },
        )

    def _execute_match_nodes(self, command: MatchNodesCommand) -> CommandOutcome:
        nodes = self.store.get_nodes_by_type(command.node_type)
        return CommandOutcome(
            command=command.text,
            type=command.kind.value,
            result={
                "pattern": command.pattern,
                "matchedNodes": [node.to_summary() for node in nodes],
                "count": len(nodes),
                "returnVariable": command.return_variable,
            },
        )

    def _execute_match_relationships(self, command: MatchRelationshipsCommand) -> CommandOutcome:
        relationships = self.store.get_relationships_by_type(command.relationship_type)
        return CommandOutcome(
            command=command.text,
            type=command.kind.value,
            result={
                "pattern": command.pattern,
                "matchedRelationships": [rel.to_summary() for rel in relationships],
                "count": len(relationships),
                "returnVariable": command.return_variable,
            },
        )

    def _execute_clear(self, command: ClearCommand) -> CommandOutcome:
        self.store.clear_graph()
        return CommandOutcome(
            command=command.text,
            type=command.kind.value,
            result=CLEAR_MESSAGE,
        )

    def _execute_unknown(self, command: UnknownCommand) -> CommandOutcome:
        self.logger.warning("Unknown command", command=command.text)
        return CommandOutcome(
            command=command.text,
            type=command.kind.value,
            result=f"Unknown command: {command.text}",
            success=False,
        )
