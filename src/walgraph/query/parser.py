"""Line-oriented command parser.

Commands are recognized by an ordered list of shape matchers, each a small
regular expression over one line. The first matcher that accepts the line
decides the command. This is deliberately not a general Cypher grammar.
"""

import re
from typing import Callable, List, Optional, Tuple

import structlog

from ..exceptions import ParseError
from .commands import (
    DEFAULT_VARIABLE,
    ClearCommand,
    Command,
    CreateCommand,
    MatchNodesCommand,
    MatchRelationshipsCommand,
    UnknownCommand,
)
from .properties import parse_properties

logger = structlog.get_logger(__name__)

CREATE_KEYWORD_RE = re.compile(r"^CREATE\b", re.IGNORECASE)

# CREATE ( [var :] Type [ {props} ] )
CREATE_RE = re.compile(
    r"^CREATE\s*\(\s*(?:(\w+)\s*:\s*|:\s*)?(\w+)\s*(\{[^}]*\})?\s*\)\s*$",
    re.IGNORECASE,
)

# MATCH ( [var] [: Type] ) RETURN var[...]; only the leading name is kept
MATCH_NODES_RE = re.compile(
    r"^MATCH\s*\(\s*(\w*)\s*(?::\s*(\w+))?\s*\)\s*RETURN\s+(\w+)",
    re.IGNORECASE,
)

# MATCH ( [var] ) RETURN <anything>
MATCH_ALL_RE = re.compile(r"^MATCH\s*\(\s*\w*\s*\)\s*RETURN\b", re.IGNORECASE)

# MATCH ( [a] ) - [ [r] [: TYPE] ] - ( [b] ) [RETURN var]
MATCH_RELATIONSHIPS_RE = re.compile(
    r"^MATCH\s*\(\s*(\w*)\s*\)\s*-\s*\[\s*(\w*)\s*(?::\s*(\w+))?\s*\]\s*-\s*\(\s*(\w*)\s*\)"
    r"(?:\s*RETURN\s+(\w+))?\s*$",
    re.IGNORECASE,
)

CLEAR_RE = re.compile(r"^CLEAR\s*$", re.IGNORECASE)


def match_create(line: str) -> Optional[CreateCommand]:
    """Recognize a CREATE command.

    Raises:
        ParseError: If the line starts with CREATE but is not a valid
            node creation, or its property literal has unbalanced quotes
    """
    if not CREATE_KEYWORD_RE.match(line):
        return None

    match = CREATE_RE.match(line)
    if not match:
        raise ParseError(f"Invalid CREATE syntax: {line}", line)

    variable, node_type, literal = match.groups()
    properties = parse_properties(literal) if literal else {}
    return CreateCommand(
        text=line,
        node_type=node_type,
        variable=variable or DEFAULT_VARIABLE,
        properties=properties,
    )


def match_nodes(line: str) -> Optional[MatchNodesCommand]:
    """Recognize ``MATCH (var:Type) RETURN var``."""
    match = MATCH_NODES_RE.match(line)
    if not match:
        return None

    variable, node_type, return_variable = match.groups()
    return MatchNodesCommand(
        text=line,
        variable=variable,
        node_type=node_type,
        return_variable=return_variable,
    )


def match_all_nodes(line: str) -> Optional[MatchNodesCommand]:
    """Recognize the ``MATCH (...) RETURN ...`` fallback that selects every node."""
    if not MATCH_ALL_RE.match(line):
        return None
    return MatchNodesCommand(text=line, match_all=True)


def match_relationships(line: str) -> Optional[MatchRelationshipsCommand]:
    """Recognize ``MATCH (a)-[r:TYPE]-(b)``."""
    match = MATCH_RELATIONSHIPS_RE.match(line)
    if not match:
        return None

    source_variable, rel_variable, rel_type, target_variable, return_variable = match.groups()
    return MatchRelationshipsCommand(
        text=line,
        relationship_type=rel_type,
        relationship_variable=rel_variable,
        source_variable=source_variable,
        target_variable=target_variable,
        return_variable=return_variable or "relationships",
    )


def match_clear(line: str) -> Optional[ClearCommand]:
    """Recognize ``CLEAR``."""
    if not CLEAR_RE.match(line):
        return None
    return ClearCommand(text=line)


ShapeMatcher = Callable[[str], Optional[Command]]

SHAPE_MATCHERS: List[Tuple[str, ShapeMatcher]] = [
    ("create", match_create),
    ("match_nodes", match_nodes),
    ("match_all_nodes", match_all_nodes),
    ("match_relationships", match_relationships),
    ("clear", match_clear),
]


class CommandParser:
    """Turns single lines of command text into typed commands.

    Parsing has no side effects on any store.
    """

    def __init__(self, matchers: Optional[List[Tuple[str, ShapeMatcher]]] = None):
        """Initialize the parser.

        Args:
            matchers: Ordered (name, matcher) pairs; defaults to the
                built-in command shapes
        """
        self.matchers = list(matchers) if matchers is not None else list(SHAPE_MATCHERS)
        self.logger = logger.bind(component=self.__class__.__name__)

    def parse(self, line: str) -> Command:
        """Parse one line of command text.

        Args:
            line: Command text; surrounding whitespace is ignored

        Returns:
            The typed command, or ``UnknownCommand`` if no shape fits

        Raises:
            ParseError: If the line is empty, or a CREATE line is malformed
        """
        text = line.strip()
        if not text:
            raise ParseError("Cannot parse an empty command", line)

        for name, matcher in self.matchers:
            command = matcher(text)
            if command is not None:
                self.logger.debug("Parsed command", shape=name, command=text)
                return command

        self.logger.debug("Unrecognized command", command=text)
        return UnknownCommand(text=text)


def parse_command(line: str) -> Command:
    """Parse one line with the default command shapes."""
    return CommandParser().parse(line)
