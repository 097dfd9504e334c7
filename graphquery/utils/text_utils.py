"""
Text utilities for pulling query text out of LLM responses.
"""

import re

CODE_BLOCK_PATTERN = re.compile(r'```[ \t]*([A-Za-z0-9_-]*)[ \t]*\n(.*?)```', re.DOTALL)


def clean_code_block(response: str) -> str:
    """Clean LLM response by removing code block markers.

    Args:
        response: Raw LLM response

    Returns:
        Text with leading and trailing fences removed
    """
    response = response.strip()

    # Remove ```cypher, ```json and bare ``` markers
    if response.startswith('```'):
        first_newline = response.find('\n')
        response = response[first_newline + 1:] if first_newline != -1 else response[3:]

    if response.endswith('```'):
        response = response[:-3]

    return response.strip()


def extract_query_text(response: str) -> str:
    """Extract the query from a model reply.

    Prefers the first fenced code block, which may be surrounded by prose;
    without one the whole reply is treated as the query.

    Args:
        response: Raw LLM response

    Returns:
        The query text, stripped
    """
    if not response:
        return ''

    match = CODE_BLOCK_PATTERN.search(response)
    if match:
        return match.group(2).strip()
    return clean_code_block(response)
