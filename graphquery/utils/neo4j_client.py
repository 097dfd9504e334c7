"""
Neo4j graph database client built on the official neo4j driver.
"""

from typing import Any, Dict, Optional

from neo4j import GraphDatabase
from neo4j.exceptions import Neo4jError, ServiceUnavailable, SessionExpired
from neo4j.graph import Node, Path, Relationship

from .config import Neo4jConfig
from .graph_store import GraphStore, GraphStoreError, RawResult
from .logging_config import get_logger

logger = get_logger(__name__)

COUNTER_NAMES = ('nodes_created', 'nodes_deleted', 'relationships_created', 'relationships_deleted', 'properties_set',
                 'labels_added', 'labels_removed', 'indexes_added', 'indexes_removed', 'constraints_added',
                 'constraints_removed', 'system_updates')


class Neo4jClientError(GraphStoreError):
    """Custom exception for Neo4j errors."""
    pass


def to_plain(value: Any) -> Any:
    """Convert driver graph types into plain dicts and lists.

    Nodes keep ``element_id`` and ``labels``, relationships keep ``element_id`` and
    ``type``; the binding normalizer recognizes graph entities by those keys.
    """
    if isinstance(value, Node):
        return {'element_id': value.element_id, 'labels': sorted(value.labels), 'properties': to_plain(dict(value))}
    if isinstance(value, Relationship):
        return {
            'element_id': value.element_id,
            'type': value.type,
            'start': value.start_node.element_id if value.start_node is not None else None,
            'end': value.end_node.element_id if value.end_node is not None else None,
            'properties': to_plain(dict(value))
        }
    if isinstance(value, Path):
        return {'nodes': [to_plain(n) for n in value.nodes], 'relationships': [to_plain(r) for r in value.relationships]}
    if isinstance(value, dict):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    if hasattr(value, 'iso_format'):
        # neo4j.time temporal values
        return value.iso_format()
    return value


class Neo4jClient(GraphStore):
    """Neo4j client holding one driver; each query runs in its own short session."""

    def __init__(self, config: Neo4jConfig):
        """
        Initialize the Neo4j driver.

        Args:
            config: Neo4jConfig instance with connection parameters
        """
        self.config = config
        self.driver = GraphDatabase.driver(config.uri, auth=(config.username, config.password))

        logger.info(f'Connected to Neo4j at {config.uri} (database: {config.database})')

    @property
    def connected(self) -> bool:
        return self.driver is not None

    def close(self):
        """Close the Neo4j driver."""
        if self.driver is not None:
            self.driver.close()
            self.driver = None

    def run_query(self, query: str, params: Optional[Dict[str, Any]] = None) -> RawResult:
        """
        Execute a Cypher query.

        Args:
            query: Cypher query text
            params: Named parameters

        Returns:
            RawResult with the declared projection and update counters

        Raises:
            Neo4jClientError: If the query fails or the database is unavailable
        """
        if self.driver is None:
            raise Neo4jClientError('Not connected to Neo4j')

        params = params or {}
        try:
            with self.driver.session(database=self.config.database) as session:
                result = session.run(query, params)
                columns = list(result.keys())
                records = [{key: to_plain(record[key]) for key in columns} for record in result]
                summary = result.consume()
        except (ServiceUnavailable, SessionExpired) as e:
            logger.error(f'Neo4j unavailable: {e}')
            raise Neo4jClientError(f'Neo4j unavailable: {e}')
        except Neo4jError as e:
            logger.error(f'Neo4j query failed: {e.message or e}')
            raise Neo4jClientError(e.message or str(e))

        counters = {name: getattr(summary.counters, name, 0) for name in COUNTER_NAMES}
        logger.debug(f'Neo4j query returned {len(records)} rows')
        return RawResult(columns=columns,
                         records=records,
                         summary={
                             'query': summary.query if summary.query is not None else query,
                             'parameters': summary.parameters if summary.parameters is not None else params,
                             'counters': {k: v for k, v in counters.items() if v}
                         })
