"""
Amazon Bedrock chat transport with retry logic and per-session conversation history.
"""

import random
import time
from typing import Any, Dict, List, Optional, Sequence

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ..models.core import ASSISTANT, SYSTEM, USER, ChatTurn
from .config import BedrockLLMConfig
from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_SYSTEM_PROMPT = 'You are a helpful assistant that explores a property graph and writes openCypher queries.'

# Converse rejects blank text blocks
EMPTY_TURN_PLACEHOLDER = '(empty response)'


class BedrockLLMError(Exception):
    """Custom exception for Bedrock LLM errors."""
    pass


class ChatTransportError(Exception):
    """Raised when a chat round trip cannot produce a model reply."""
    pass


class BedrockLLM:
    """Amazon Bedrock Converse client with retry logic and error handling."""

    def __init__(self, config: BedrockLLMConfig):
        """
        Initialize Bedrock LLM client.

        Args:
            config: BedrockLLMConfig instance with connection parameters
        """
        self.config = config
        self.model_id = config.model_id

        self.bedrock_runtime = boto3.client(
            'bedrock-runtime',
            region_name=config.region,
            config=BotoConfig(
                connect_timeout=600,
                read_timeout=600,
                retries={'max_attempts': 0}  # retries are handled in converse()
            ))

        logger.info(f'Initialized Bedrock LLM client with model: {self.model_id}')

    def converse(self, messages: List[Dict[str, Any]], system_prompt: str, max_tokens: Optional[int] = None) -> str:
        """
        Send a conversation to Bedrock and return the assistant text.

        Args:
            messages: Alternating user/assistant messages in Converse format
            system_prompt: System prompt for the conversation
            max_tokens: Maximum tokens to generate (uses config default if None)

        Returns:
            The generated assistant text

        Raises:
            BedrockLLMError: If all retry attempts fail
        """
        inf_params = {
            'maxTokens': max_tokens or self.config.max_tokens,
            'temperature': self.config.temperature,
        }

        for attempt in range(self.config.retry_attempts):
            try:
                logger.debug(f'Bedrock LLM request attempt {attempt + 1}/{self.config.retry_attempts}')

                response = self.bedrock_runtime.converse(modelId=self.model_id,
                                                         messages=messages,
                                                         system=[{'text': system_prompt}],
                                                         inferenceConfig=inf_params)

                blocks = response.get('output', {}).get('message', {}).get('content', [])
                text = ''.join(block.get('text', '') for block in blocks)

                usage = response.get('usage')
                if usage:
                    logger.debug(f"Bedrock LLM usage: {usage.get('inputTokens')} in / {usage.get('outputTokens')} out")
                return text

            except (ClientError, BotoCoreError) as e:
                logger.warning(f'Bedrock LLM attempt {attempt + 1}/{self.config.retry_attempts} failed: {e}')

                if attempt < self.config.retry_attempts - 1:
                    # Exponential backoff with jitter
                    delay = self.config.retry_delay * (2**attempt) + random.uniform(0, 1)
                    time.sleep(delay)
                else:
                    raise BedrockLLMError(f'Bedrock LLM failed after {self.config.retry_attempts} attempts: {e}')

            except Exception as e:
                logger.error(f'Unexpected error in Bedrock LLM: {e}')
                raise BedrockLLMError(f'Unexpected Bedrock LLM error: {e}')

        raise BedrockLLMError(f'Bedrock LLM failed after {self.config.retry_attempts} attempts')

    def health_check(self) -> bool:
        """
        Perform a health check on the Bedrock LLM service.

        Returns:
            True if service is healthy, False otherwise
        """
        try:
            response = self.converse(messages=[{'role': USER, 'content': [{'text': 'Hi'}]}],
                                     system_prompt="You are a helpful assistant. Respond with just 'OK'.",
                                     max_tokens=10)
            return len(response.strip()) > 0

        except Exception as e:
            logger.error(f'Bedrock LLM health check failed: {e}')
            return False


class BedrockChatClient:
    """One chat session: keeps the history and sends it in full on every round trip.

    Bedrock only accepts alternating user/assistant messages, so system turns sent
    mid-conversation are delivered as user content and consecutive turns of the
    same role are merged.
    """

    def __init__(self, llm: BedrockLLM, system_message: str = DEFAULT_SYSTEM_PROMPT):
        self.llm = llm
        self.system_message = system_message
        self.history: List[ChatTurn] = []

    def send_messages(self, turns: Sequence[ChatTurn]) -> ChatTurn:
        """
        Append turns to the conversation and return the model reply.

        Args:
            turns: Turns to send, in order

        Returns:
            The assistant turn, tagged with the stage of the last sent turn

        Raises:
            ChatTransportError: If Bedrock fails to answer
        """
        pending = self.history + list(turns)
        stage = turns[-1].stage if turns else ''

        try:
            content = self.llm.converse(messages=self._to_converse_messages(pending), system_prompt=self.system_message)
        except BedrockLLMError as e:
            logger.error(f'Chat round trip failed at stage {stage!r}: {e}')
            raise ChatTransportError(f'Chat request failed: {e}')

        reply = ChatTurn(role=ASSISTANT, content=content, stage=stage)
        self.history = pending + [reply]
        logger.debug(f'Chat round trip complete ({len(self.history)} turns in history)')
        return reply

    def reset(self) -> None:
        self.history = []

    @staticmethod
    def _to_converse_messages(turns: Sequence[ChatTurn]) -> List[Dict[str, Any]]:
        messages: List[Dict[str, Any]] = []
        for turn in turns:
            role = ASSISTANT if turn.role == ASSISTANT else USER
            if turn.role not in (SYSTEM, USER, ASSISTANT):
                logger.warning(f'Unknown chat role {turn.role!r}, sending as user')

            text = turn.content if turn.content and turn.content.strip() else EMPTY_TURN_PLACEHOLDER
            if messages and messages[-1]['role'] == role:
                messages[-1]['content'][0]['text'] += f'\n\n{text}'
            else:
                messages.append({'role': role, 'content': [{'text': text}]})

        # Converse requires the conversation to open with a user message
        if messages and messages[0]['role'] == ASSISTANT:
            messages.insert(0, {'role': USER, 'content': [{'text': '(conversation start)'}]})
        return messages
