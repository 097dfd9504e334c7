"""
Query pipeline: question -> query building -> execution -> bindings -> summary.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from ..models.core import BindingsResult, ChatTurn, QueryFailure, QuerySummary
from ..utils.logging_config import get_logger
from ..utils.text_utils import extract_query_text
from .binding_normalizer import to_bindings
from .query_building import ChatClient, QueryBuildingWorkflow
from .query_executor import QueryExecutor
from .summarization import SummarizationService

logger = get_logger(__name__)

RESULT_NAME = 'Query Result'
ERROR_NAME = 'Error Analysis'


@dataclass
class QueryRunResult:
    """Everything produced for one query run; ``bindings`` and ``error`` are exclusive."""
    query: str
    name: str
    bindings: Optional[BindingsResult] = None
    error: Optional[str] = None
    summary: Optional[str] = None
    execution_summary: Optional[QuerySummary] = None
    transcript: List[ChatTurn] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


class QueryPipeline:
    """Run model-authored or user-provided queries and explain the outcome."""

    def __init__(self, chat_factory: Callable[[], ChatClient], executor: QueryExecutor, max_loops: Optional[int] = None):
        """
        Initialize the query pipeline.

        Args:
            chat_factory: Returns a new chat session; one per workflow and per summary
            executor: Executor bound to the graph store
            max_loops: Search round trip ceiling (uses config default if None)
        """
        self.chat_factory = chat_factory
        self.executor = executor
        self.max_loops = max_loops
        self.summarizer = SummarizationService(chat_factory)

    def ask(self, question: str) -> QueryRunResult:
        """
        Answer a question end to end.

        Args:
            question: Natural language question

        Returns:
            QueryRunResult for the query the model wrote
        """
        workflow = QueryBuildingWorkflow(self.chat_factory(), self.executor, max_loops=self.max_loops)
        final_turn = workflow.run(question)
        query = extract_query_text(final_turn.content)
        logger.info(f'Model wrote query: {query}')

        result = self.run_query(query)
        result.transcript = list(workflow.transcript)
        return result

    def run_query(self, query: str) -> QueryRunResult:
        """
        Execute a query, normalize its result and summarize it.

        Summary failures are logged and leave ``summary`` empty.

        Args:
            query: Query text

        Returns:
            QueryRunResult with bindings or an error
        """
        outcome = self.executor.execute(query)

        if isinstance(outcome, QueryFailure):
            logger.warning(f'Query failed ({outcome.kind.value}): {outcome.message}')
            result = QueryRunResult(query=query, name=ERROR_NAME, error=outcome.message)
            try:
                result.summary = self.summarizer.explain_error(query, outcome.message)
            except Exception as e:
                logger.error(f'Error getting error explanation: {e}')
            return result

        bindings = to_bindings(outcome)
        result = QueryRunResult(query=query, name=RESULT_NAME, bindings=bindings, execution_summary=outcome.summary)
        try:
            result.summary = self.summarizer.summarize_results(query, bindings)
        except Exception as e:
            logger.error(f'Error summarizing results: {e}')
        return result
