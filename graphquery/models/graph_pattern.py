"""
Node and relationship patterns recovered from query text for visualization.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional


@dataclass
class NodePattern:
    """A node pattern such as ``(m:Movie {title: "Heat"})``."""
    variable: str
    labels: List[str] = field(default_factory=list)
    properties: Optional[Dict[str, str]] = None


@dataclass
class RelPattern:
    """A directed relationship pattern between two node variables."""
    type: str
    source: str
    target: str
    variable: Optional[str] = None
    properties: Optional[Dict[str, str]] = None


@dataclass
class GraphPattern:
    """Skeleton of a query; every relationship endpoint resolves to a node in ``nodes``."""
    nodes: List[NodePattern] = field(default_factory=list)
    relationships: List[RelPattern] = field(default_factory=list)

    def node(self, variable: str) -> Optional[NodePattern]:
        for node in self.nodes:
            if node.variable == variable:
                return node
        return None
