"""
MCP Interface Layer using fastmcp for graph exploration tools.
"""
import threading
from typing import Any, Dict, Optional

from fastmcp import FastMCP

from .services.graph_view import to_graph_view
from .services.pattern_extractor import extract
from .services.query_executor import QueryExecutor
from .services.query_pipeline import QueryPipeline, QueryRunResult
from .utils.bedrock_chat import BedrockChatClient, BedrockLLM, ChatTransportError
from .utils.config import config
from .utils.graph_store import create_graph_store
from .utils.logging_config import get_logger

logger = get_logger(__name__)

# Initialize FastMCP application
mcp = FastMCP('Graph Query')

_pipeline: Optional[QueryPipeline] = None
_pipeline_lock = threading.Lock()


def get_pipeline() -> QueryPipeline:
    """Create the pipeline on first use so importing this module needs no AWS or database access.

    Concurrent first calls share one pipeline and one graph store connection.
    """
    global _pipeline
    if _pipeline is None:
        with _pipeline_lock:
            if _pipeline is None:
                llm = BedrockLLM(config.bedrock_llm)
                executor = QueryExecutor(create_graph_store(config))
                _pipeline = QueryPipeline(lambda: BedrockChatClient(llm), executor)
                logger.info(f'Query pipeline ready ({config.graph_backend} backend)')
    return _pipeline


def _result_payload(result: QueryRunResult) -> Dict[str, Any]:
    return {
        'name': result.name,
        'query': result.query,
        'results': result.bindings.to_dict() if result.bindings is not None else None,
        'error': result.error,
        'summary': result.summary,
    }


@mcp.tool()
def ask_graph(question: str) -> Dict[str, Any]:
    """Answer a question about the knowledge graph.

    Args:
        question: Natural language question

    Returns:
        The generated query, its result bindings or error, and a summary

    Raises:
        Exception: If the model cannot be reached
    """
    if not question or not question.strip():
        raise ValueError('Question is required')

    try:
        return _result_payload(get_pipeline().ask(question))
    except ChatTransportError as e:
        logger.error(f'Chat transport error in MCP ask: {e}')
        raise Exception(f'Graph question failed: {e}')


@mcp.tool()
def run_graph_query(query: str) -> Dict[str, Any]:
    """Run an openCypher query and summarize the result.

    Args:
        query: openCypher query text

    Returns:
        Result bindings or error, and a summary
    """
    if not query or not query.strip():
        raise ValueError('Query is required')

    return _result_payload(get_pipeline().run_query(query))


@mcp.tool()
def extract_query_pattern(query: str) -> Dict[str, Any]:
    """Extract the node/relationship skeleton of a query for visualization.

    Args:
        query: Query text

    Returns:
        Dictionary with 'nodes' and 'edges'
    """
    return to_graph_view(extract(query))


if __name__ == '__main__':
    transport = config.mcp.transport
    host = config.mcp.host
    port = config.mcp.port
    mcp.run(transport=transport, host=host, port=port)
