"""
Graph store interface shared by the Neptune and Neo4j clients.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .config import AppConfig
from .logging_config import get_logger

logger = get_logger(__name__)


class GraphStoreError(Exception):
    """Base exception for graph store errors."""
    pass


@dataclass
class RawResult:
    """Raw output of one query.

    Attributes:
        columns: Declared projection, if the store reports one
        records: One mapping of column name to value per row
        summary: query text, parameters and update counters
    """
    columns: Optional[List[str]]
    records: List[Mapping[str, Any]]
    summary: Dict[str, Any] = field(default_factory=dict)


class GraphStore:
    """A connection to a graph database accepting openCypher with named parameters."""

    @property
    def connected(self) -> bool:
        raise NotImplementedError

    def run_query(self, query: str, params: Optional[Dict[str, Any]] = None) -> RawResult:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    def health_check(self) -> bool:
        """
        Perform a health check on the graph store.

        Returns:
            True if a trivial query succeeds, False otherwise
        """
        try:
            result = self.run_query('RETURN 1 AS n')
            return len(result.records) > 0
        except Exception as e:
            logger.error(f'Graph store health check failed: {e}')
            return False


def create_graph_store(config: AppConfig) -> GraphStore:
    """Create the graph store selected by ``config.graph_backend``.

    Args:
        config: Application configuration

    Returns:
        A connected graph store

    Raises:
        GraphStoreError: If the backend is unknown
    """
    if config.graph_backend == 'neptune':
        from .neptune_client import NeptuneClient
        return NeptuneClient(config.neptune)
    if config.graph_backend == 'neo4j':
        from .neo4j_client import Neo4jClient
        return Neo4jClient(config.neo4j)
    raise GraphStoreError(f'Unknown graph backend: {config.graph_backend}')
