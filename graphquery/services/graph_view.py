"""
Turn an extracted GraphPattern into node and edge dicts for a graph view.
"""

import hashlib
from typing import Any, Dict, List

from ..models.graph_pattern import GraphPattern, NodePattern, RelPattern

DEFAULT_NODE_LABEL = 'Node'
EDGE_COLOR = '#1890ff'


def color_for_label(label: str) -> str:
    """Deterministic hex colour for a label."""
    digest = hashlib.md5(label.encode('utf-8')).hexdigest()
    return f'#{digest[:6]}'


def node_view(node: NodePattern) -> Dict[str, Any]:
    primary_label = node.labels[0] if node.labels else DEFAULT_NODE_LABEL
    return {
        'id': node.variable,
        'label': ':'.join([node.variable] + node.labels),
        'color': color_for_label(primary_label),
        'data': {
            'label': primary_label,
            'properties': dict(node.properties or {})
        }
    }


def edge_view(relationship: RelPattern) -> Dict[str, Any]:
    return {
        'id': relationship.variable or f'{relationship.source}-{relationship.type}->{relationship.target}',
        'source': relationship.source,
        'target': relationship.target,
        'label': relationship.type,
        'color': EDGE_COLOR,
        'data': {
            'type': relationship.type,
            'properties': dict(relationship.properties or {})
        }
    }


def to_graph_view(pattern: GraphPattern) -> Dict[str, List[Dict[str, Any]]]:
    """Build ``{'nodes': [...], 'edges': [...]}`` from a pattern."""
    return {
        'nodes': [node_view(node) for node in pattern.nodes],
        'edges': [edge_view(relationship) for relationship in pattern.relationships],
    }
