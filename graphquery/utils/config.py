"""
Configuration management for AWS services, graph stores and workflow settings.
"""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass
class BedrockLLMConfig:
    """Configuration for Amazon Bedrock LLM service."""
    region: str
    model_id: str
    max_tokens: int
    temperature: float
    retry_attempts: int
    retry_delay: float


@dataclass
class NeptuneConfig:
    """Configuration for Amazon Neptune openCypher endpoint."""
    endpoint: str
    port: int
    region: str
    retry_attempts: int


@dataclass
class Neo4jConfig:
    """Configuration for a Neo4j database."""
    uri: str
    username: str
    password: str
    database: str


@dataclass
class WorkflowConfig:
    """Configuration for the query building workflow."""
    max_loops: int
    search_limit: int


@dataclass
class MCPConfig:
    """Configuration for MCP interface."""
    transport: str
    host: str
    port: int


@dataclass
class AppConfig:
    """Main application configuration."""
    environment: str
    log_level: str
    graph_backend: str
    bedrock_llm: BedrockLLMConfig
    neptune: NeptuneConfig
    neo4j: Neo4jConfig
    workflow: WorkflowConfig
    mcp: MCPConfig


def load_config() -> AppConfig:
    """Load configuration from environment variables with defaults."""
    environment = os.getenv('ENVIRONMENT', 'development')

    # Bedrock configuration
    bedrock_llm_config = BedrockLLMConfig(region=os.getenv('BEDROCK_LLM_AWS_REGION', 'us-east-1'),
                                          model_id=os.getenv('BEDROCK_LLM_MODEL_ID', 'anthropic.claude-3-sonnet-20240229-v1:0'),
                                          max_tokens=int(os.getenv('BEDROCK_LLM_MAX_TOKENS', '4096')),
                                          temperature=float(os.getenv('BEDROCK_LLM_TEMPERATURE', '0.0')),
                                          retry_attempts=int(os.getenv('BEDROCK_LLM_RETRY_ATTEMPTS', '3')),
                                          retry_delay=float(os.getenv('BEDROCK_LLM_RETRY_DELAY', '1.0')))

    # Neptune configuration
    neptune_config = NeptuneConfig(endpoint=os.getenv('NEPTUNE_ENDPOINT', 'localhost'),
                                   port=int(os.getenv('NEPTUNE_PORT', '8182')),
                                   region=os.getenv('NEPTUNE_AWS_REGION', 'us-east-1'),
                                   retry_attempts=int(os.getenv('NEPTUNE_RETRY_ATTEMPTS', '2')))

    # Neo4j configuration
    neo4j_config = Neo4jConfig(uri=os.getenv('NEO4J_URI', 'bolt://localhost:7687'),
                               username=os.getenv('NEO4J_USERNAME', 'neo4j'),
                               password=os.getenv('NEO4J_PASSWORD', ''),
                               database=os.getenv('NEO4J_DATABASE', 'neo4j'))

    # Query building workflow configuration
    workflow_config = WorkflowConfig(max_loops=int(os.getenv('WORKFLOW_MAX_LOOPS', '20')),
                                     search_limit=int(os.getenv('WORKFLOW_SEARCH_LIMIT', '5')))

    # MCP configuration
    mcp_config = MCPConfig(transport=os.getenv('MCP_TRANSPORT', 'sse'),
                           host=os.getenv('MCP_HOST', '127.0.0.1'),
                           port=int(os.getenv('MCP_PORT', '8000')))

    return AppConfig(environment=environment,
                     log_level=os.getenv('LOG_LEVEL', 'INFO'),
                     graph_backend=os.getenv('GRAPH_BACKEND', 'neptune').lower(),
                     bedrock_llm=bedrock_llm_config,
                     neptune=neptune_config,
                     neo4j=neo4j_config,
                     workflow=workflow_config,
                     mcp=mcp_config)


# Global configuration instance
config = load_config()
