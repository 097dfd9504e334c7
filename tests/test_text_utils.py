"""Tests for pulling query text out of model replies."""

import pytest

from graphquery.utils.text_utils import clean_code_block, extract_query_text


@pytest.mark.parametrize('reply, expected', [
    ('```cypher\nMATCH (n) RETURN n\n```', 'MATCH (n) RETURN n'),
    ('Sure, here it is:\n```\nRETURN 1\n```\nLet me know.', 'RETURN 1'),
    ('  MATCH (n) RETURN n  ', 'MATCH (n) RETURN n'),
    ('', ''),
])
def test_extract_query_text(reply, expected):
    assert extract_query_text(reply) == expected


def test_first_block_wins():
    assert extract_query_text('```\nRETURN 1\n```\nor\n```\nRETURN 2\n```') == 'RETURN 1'


def test_clean_code_block_single_line():
    assert clean_code_block('```RETURN 1```') == 'RETURN 1'
