"""
Amazon Neptune graph database client for openCypher over the boto3 neptunedata API.
"""

import json
from functools import wraps
from typing import Any, Dict, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError, ConnectionClosedError, EndpointConnectionError

from .config import NeptuneConfig
from .graph_store import GraphStore, GraphStoreError, RawResult
from .logging_config import get_logger

logger = get_logger(__name__)


class NeptuneError(GraphStoreError):
    """Custom exception for Neptune errors."""
    pass


def retry_on_connection_error(func):
    """Decorator to retry Neptune operations on dropped connections."""

    @wraps(func)
    def wrapper(self, *args, **kwargs):
        attempts = max(1, self.config.retry_attempts)
        for attempt in range(attempts):
            try:
                return func(self, *args, **kwargs)
            except (EndpointConnectionError, ConnectionClosedError) as e:
                if attempt < attempts - 1:
                    logger.warning(f'Connection error detected: {e}. Reconnecting...')
                    self.close()
                    self._connect()
                else:
                    logger.error(f'Error in {func.__name__}: {e}')
                    raise NeptuneError(f'Failed to {func.__name__}: {e}')
            except ClientError as e:
                message = e.response.get('Error', {}).get('Message') or str(e)
                logger.error(f'Error in {func.__name__}: {message}')
                raise NeptuneError(message)
            except BotoCoreError as e:
                logger.error(f'Error in {func.__name__}: {e}')
                raise NeptuneError(f'Failed to {func.__name__}: {e}')

    return wrapper


class NeptuneClient(GraphStore):
    """Amazon Neptune client; boto3 signs every request with SigV4."""

    def __init__(self, config: NeptuneConfig):
        """
        Initialize the Neptune data client.

        Args:
            config: NeptuneConfig instance with connection parameters
        """
        self.config = config
        self.client = None
        self._connect()

        logger.info(f'Connected to Neptune at {config.endpoint}')

    def _connect(self):
        """Create the neptunedata client for the configured cluster endpoint."""
        endpoint = self.config.endpoint
        if '://' in endpoint:
            endpoint = endpoint.split('://', 1)[1]

        region = boto3.Session().region_name or self.config.region or 'us-east-1'
        self.client = boto3.client('neptunedata',
                                   endpoint_url=f'https://{endpoint}:{self.config.port}',
                                   region_name=region)

    @property
    def connected(self) -> bool:
        return self.client is not None

    def close(self):
        """Close the Neptune client."""
        if self.client is not None:
            self.client.close()
            self.client = None

    @retry_on_connection_error
    def run_query(self, query: str, params: Optional[Dict[str, Any]] = None) -> RawResult:
        """
        Execute an openCypher query.

        Args:
            query: openCypher query text
            params: Named parameters, sent as a JSON document

        Returns:
            RawResult; Neptune reports no projection, so columns come from the rows

        Raises:
            NeptuneError: If the query fails
        """
        if self.client is None:
            raise NeptuneError('Not connected to Neptune')

        params = params or {}
        request = {'openCypherQuery': query}
        if params:
            request['parameters'] = json.dumps(params)

        response = self.client.execute_open_cypher_query(**request)
        records = response.get('results', [])

        logger.debug(f'Neptune query returned {len(records)} rows')
        return RawResult(columns=None, records=records, summary={'query': query, 'parameters': params, 'counters': {}})
