"""
Health check utilities for the application.
"""

from typing import Any, Dict

from .bedrock_chat import BedrockLLM
from .config import config
from .graph_store import create_graph_store
from .logging_config import get_logger

logger = get_logger(__name__)


def check_health() -> bool:
    """Check the health of all system components.

    Returns:
        True if all components are healthy, False otherwise
    """
    try:
        health_status = get_health_status()

        all_healthy = all(status.get('healthy', False) for status in health_status.values())

        if all_healthy:
            logger.info('All system components are healthy')
        else:
            logger.warning('Some system components are unhealthy')

        return all_healthy

    except Exception as e:
        logger.error(f'Health check failed: {e}')
        return False


def get_health_status() -> Dict[str, Any]:
    """Get detailed health status of all components.

    Returns:
        Dictionary with health status of each component
    """
    health_status = {}

    # Check Bedrock LLM
    try:
        llm = BedrockLLM(config.bedrock_llm)
        health_status['bedrock_llm'] = {
            'healthy': llm.health_check(),
            'service': 'Amazon Bedrock LLM',
            'model': config.bedrock_llm.model_id
        }
    except Exception as e:
        health_status['bedrock_llm'] = {'healthy': False, 'service': 'Amazon Bedrock LLM', 'error': str(e)}

    # Check graph store
    try:
        store = create_graph_store(config)
        try:
            health_status['graph_store'] = {'healthy': store.health_check(), 'service': config.graph_backend}
        finally:
            store.close()
    except Exception as e:
        health_status['graph_store'] = {'healthy': False, 'service': config.graph_backend, 'error': str(e)}

    return health_status
