"""
Graph query execution with success/failure wrapping.
"""

from typing import Any, Dict, List, Optional

from ..models.core import FailureKind, QueryFailure, QueryOutcome, QuerySuccess, QuerySummary
from ..utils.graph_store import GraphStore
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

NOT_CONNECTED_MESSAGE = 'Not connected to the graph database'


class QueryExecutor:
    """Run parameterized queries against one explicitly passed graph store."""

    def __init__(self, store: Optional[GraphStore] = None):
        self.store = store

    @property
    def connected(self) -> bool:
        return self.store is not None and self.store.connected

    def execute(self, query: str, params: Optional[Dict[str, Any]] = None) -> QueryOutcome:
        """Execute a query.

        Args:
            query: Query text
            params: Named parameters; never interpolated into the text

        Returns:
            QuerySuccess with unique ordered columns and aligned rows, or QueryFailure
            carrying only the error message
        """
        if not self.connected:
            logger.warning('Query attempted without a graph store connection')
            return QueryFailure(kind=FailureKind.STORE_UNREACHABLE, message=NOT_CONNECTED_MESSAGE)

        params = dict(params or {})
        try:
            raw = self.store.run_query(query, params)
        except Exception as e:
            logger.warning(f'Query failed: {e}')
            return QueryFailure(kind=FailureKind.STORE_EXECUTION_ERROR, message=str(e) or e.__class__.__name__)

        if raw.columns is not None:
            columns = _unique([str(column) for column in raw.columns])
        elif raw.records:
            columns = _unique([str(key) for key in raw.records[0].keys()])
        else:
            columns = []

        rows = [[record.get(column) for column in columns] for record in raw.records]
        summary = QuerySummary(query=raw.summary.get('query', query),
                               parameters=raw.summary.get('parameters', params) or {},
                               counters=raw.summary.get('counters') or {})

        logger.debug(f'Query returned {len(rows)} rows over columns {columns}')
        return QuerySuccess(columns=columns, rows=rows, summary=summary)


def _unique(names: List[str]) -> List[str]:
    return list(dict.fromkeys(names))
