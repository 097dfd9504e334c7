"""
Dialogue-driven query building: the model searches the graph turn by turn, then writes a query.
"""

from typing import List, Optional, Protocol, Sequence

from ..models.core import SYSTEM, ChatTurn, Invalid, Stop
from ..utils.config import config
from ..utils.logging_config import get_logger
from .action_classifier import classify
from .prompts import (FINAL_QUERY_SYSTEM_MESSAGE, INITIAL_QUERY_BUILDING_SYSTEM_MESSAGE, INVALID_RESPONSE_MESSAGE,
                      STAGE_QUERY_BUILDING)
from .query_executor import QueryExecutor
from .search_handlers import SearchHandlers

logger = get_logger(__name__)


class ChatClient(Protocol):
    """Chat transport: one round trip per call, history kept by the client."""

    def send_messages(self, turns: Sequence[ChatTurn]) -> ChatTurn:
        ...


class QueryBuildingWorkflow:
    """Bounded search loop that ends on STOP or after ``max_loops`` round trips.

    Malformed replies are corrected by re-prompting and search failures are fed
    back as system turns. Errors raised by the chat client propagate.
    """

    def __init__(self, chat_client: ChatClient, executor: QueryExecutor, max_loops: Optional[int] = None,
                 search_limit: Optional[int] = None):
        self.chat_client = chat_client
        self.max_loops = config.workflow.max_loops if max_loops is None else max_loops
        self.handlers = SearchHandlers(executor,
                                       limit=config.workflow.search_limit if search_limit is None else search_limit)
        self.transcript: List[ChatTurn] = []

    def _send(self, turn: ChatTurn) -> ChatTurn:
        self.transcript.append(turn)
        reply = self.chat_client.send_messages([turn])
        self.transcript.append(reply)
        return reply

    def run(self, user_question: str) -> ChatTurn:
        """
        Run the workflow for one question.

        Args:
            user_question: The user's natural language question

        Returns:
            The model turn holding the final query
        """
        self.transcript = []
        reply = self._send(ChatTurn(role=SYSTEM, content=INITIAL_QUERY_BUILDING_SYSTEM_MESSAGE, stage=STAGE_QUERY_BUILDING))

        iterations = 0
        while iterations < self.max_loops:
            iterations += 1
            action = classify(reply.content)
            logger.debug(f'Round {iterations}/{self.max_loops}: {type(action).__name__}')

            if isinstance(action, Stop):
                break

            if isinstance(action, Invalid):
                logger.warning(f'Invalid model reply, re-prompting: {action.raw_text[:200]!r}')
                reply = self._send(ChatTurn(role=SYSTEM, content=INVALID_RESPONSE_MESSAGE, stage=STAGE_QUERY_BUILDING))
            else:
                reply = self._send(self.handlers.handle(action))
        else:
            logger.info(f'Search loop reached the limit of {self.max_loops} rounds without STOP')

        logger.info(f'Requesting final query after {iterations} rounds')
        return self._send(
            ChatTurn(role=SYSTEM, content=FINAL_QUERY_SYSTEM_MESSAGE.format(question=user_question), stage=STAGE_QUERY_BUILDING))


def run_query_building_workflow(chat_client: ChatClient,
                                user_question: str,
                                executor: QueryExecutor,
                                max_loops: Optional[int] = None) -> ChatTurn:
    """Build a query for ``user_question`` through a bounded search dialogue."""
    return QueryBuildingWorkflow(chat_client, executor, max_loops=max_loops).run(user_question)
