"""
Plain-language summaries of query results and explanations of query errors.
"""

from typing import Callable

from ..models.core import SYSTEM, USER, BindingsResult, ChatTurn
from ..utils.logging_config import get_logger
from .binding_normalizer import format_bindings_as_text
from .prompts import (ERROR_EXPLANATION_MESSAGE, STAGE_SUMMARIZATION, SUMMARIZATION_SYSTEM_MESSAGE,
                      SUMMARIZATION_USER_MESSAGE)
from .query_building import ChatClient

logger = get_logger(__name__)


class SummarizationError(Exception):
    """Custom exception for summarization errors."""
    pass


class SummarizationService:
    """Ask the model to explain results or errors, each request in a fresh chat session."""

    def __init__(self, chat_factory: Callable[[], ChatClient]):
        """
        Initialize the summarization service.

        Args:
            chat_factory: Returns a new chat session per request
        """
        self.chat_factory = chat_factory

    def summarize_results(self, query: str, result: BindingsResult) -> str:
        """Summarize the results of a query.

        Args:
            query: The executed query text
            result: Normalized bindings of the query

        Returns:
            Summary text from the model

        Raises:
            SummarizationError: If no result bindings are given
        """
        if result is None:
            raise SummarizationError('Cannot summarize error result')

        chat = self.chat_factory()
        chat.send_messages([ChatTurn(role=SYSTEM, content=SUMMARIZATION_SYSTEM_MESSAGE, stage=STAGE_SUMMARIZATION)])

        content = SUMMARIZATION_USER_MESSAGE.format(query=query, results=format_bindings_as_text(result))
        response = chat.send_messages([ChatTurn(role=USER, content=content, stage=STAGE_SUMMARIZATION)])

        logger.debug(f'Summarized {len(result.bindings)} result rows')
        return response.content

    def explain_error(self, query: str, error_message: str) -> str:
        """Ask the model why a query failed and how to fix it."""
        chat = self.chat_factory()
        content = ERROR_EXPLANATION_MESSAGE.format(query=query, error=error_message)
        response = chat.send_messages([ChatTurn(role=USER, content=content, stage=STAGE_SUMMARIZATION)])
        return response.content
