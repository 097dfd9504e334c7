"""
Best-effort extraction of node and relationship patterns from query text.

This is a scanner for visualization, not a parser. It understands node patterns
``(var:Label:Other {key: value})`` and connectors between adjacent node patterns
(``-[var:TYPE {key: value}]->``, ``-->``, ``->``, ``--``, ``-`` and their ``<-``
forms). Property maps are split naively on commas and colons, so nested maps or
commas inside string values come out partial. ``//`` is treated as a comment
start even inside string literals, so ``{url: "http://x"}`` loses the rest of
its line. Anything it cannot read is skipped.
"""

import re
from typing import Dict, List, Optional

from ..models.graph_pattern import GraphPattern, NodePattern, RelPattern

DEFAULT_RELATIONSHIP_TYPE = 'RELATED_TO'

LINE_COMMENT_PATTERN = re.compile(r'//[^\n]*')
WHITESPACE_PATTERN = re.compile(r'\s+')
NODE_PATTERN = re.compile(r'\(\s*([A-Za-z0-9_]+)\s*((?::\s*[A-Za-z0-9_]+\s*)*)(?:\{([^}]*)\})?\s*\)')
CONNECTOR_PATTERN = re.compile(r'^\s*(<)?\s*-\s*(?:\[([^\]]*)\])?\s*-?\s*(>)?\s*$')
REL_VARIABLE_PATTERN = re.compile(r'^\s*([A-Za-z0-9_]+)')
REL_TYPE_PATTERN = re.compile(r':\s*([A-Za-z0-9_]+)')
REL_PROPERTIES_PATTERN = re.compile(r'\{([^}]*)\}')
QUOTED_PATTERN = re.compile(r'^["\'](.*)["\']$')


def normalize_query(query: str) -> str:
    """Drop ``//`` line comments, then collapse whitespace."""
    if not isinstance(query, str):
        query = '' if query is None else str(query)
    without_comments = LINE_COMMENT_PATTERN.sub('', query)
    return WHITESPACE_PATTERN.sub(' ', without_comments).strip()


def parse_properties(text: Optional[str]) -> Optional[Dict[str, str]]:
    """Parse ``key: value, ...`` naively; returns None when nothing was parsed."""
    if not text:
        return None

    properties: Dict[str, str] = {}
    for pair in text.split(','):
        key, _, value = pair.partition(':')
        key, value = key.strip(), value.strip()
        if key and value:
            properties[key] = QUOTED_PATTERN.sub(r'\1', value)
    return properties or None


def _parse_connector(text: str):
    """Return (reversed, variable, type, properties) if ``text`` is a connector, else None."""
    match = CONNECTOR_PATTERN.match(text)
    if not match:
        return None

    points_left, body, points_right = match.group(1), match.group(2) or '', match.group(3)
    properties_match = REL_PROPERTIES_PATTERN.search(body)
    head = REL_PROPERTIES_PATTERN.sub('', body)
    variable_match = REL_VARIABLE_PATTERN.match(head)
    type_match = REL_TYPE_PATTERN.search(head)

    return (bool(points_left) and not points_right,
            variable_match.group(1) if variable_match else None,
            type_match.group(1) if type_match else DEFAULT_RELATIONSHIP_TYPE,
            parse_properties(properties_match.group(1)) if properties_match else None)


def extract(query: str) -> GraphPattern:
    """Extract a GraphPattern from query text.

    Only the first occurrence of a node variable is registered; later mentions
    are ignored even if they add labels or properties. Never raises.

    Args:
        query: Query text

    Returns:
        GraphPattern; empty when nothing recognizable is found
    """
    text = normalize_query(query)
    pattern = GraphPattern()
    declared: Dict[str, NodePattern] = {}

    matches = list(NODE_PATTERN.finditer(text))
    for match in matches:
        variable = match.group(1)
        if variable in declared:
            continue
        labels = [label.strip() for label in (match.group(2) or '').split(':') if label.strip()]
        node = NodePattern(variable=variable, labels=labels, properties=parse_properties(match.group(3)))
        declared[variable] = node
        pattern.nodes.append(node)

    relationships: List[RelPattern] = []
    for left, right in zip(matches, matches[1:]):
        connector = _parse_connector(text[left.end():right.start()])
        if connector is None:
            continue

        is_reversed, variable, rel_type, properties = connector
        source, target = left.group(1), right.group(1)
        if is_reversed:
            source, target = target, source
        relationships.append(RelPattern(type=rel_type, source=source, target=target, variable=variable, properties=properties))

    for relationship in relationships:
        for variable in (relationship.source, relationship.target):
            if variable not in declared:
                declared[variable] = NodePattern(variable=variable, labels=[])
                pattern.nodes.append(declared[variable])
    pattern.relationships = relationships

    return pattern
