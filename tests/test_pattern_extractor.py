"""Tests for query pattern extraction and the graph view transform."""

import pytest

from graphquery.models.graph_pattern import NodePattern, RelPattern
from graphquery.services.graph_view import color_for_label, to_graph_view
from graphquery.services.pattern_extractor import extract, normalize_query, parse_properties


class TestNodes:

    def test_simple_relationship(self):
        pattern = extract('MATCH (a:Person)-[:KNOWS]->(b:Person) RETURN a, b')

        assert pattern.nodes == [NodePattern('a', ['Person']), NodePattern('b', ['Person'])]
        assert pattern.relationships == [RelPattern(type='KNOWS', source='a', target='b')]

    def test_multiple_labels_and_properties(self):
        node = extract('MATCH (m:Movie:Classic {title: "The Matrix", year: 1999})').nodes[0]
        assert node.labels == ['Movie', 'Classic']
        assert node.properties == {'title': 'The Matrix', 'year': '1999'}

    def test_first_occurrence_wins(self):
        pattern = extract("MATCH (n:Person) MATCH (n:Actor {name: 'x'}) RETURN n")
        assert pattern.nodes == [NodePattern('n', ['Person'])]

    def test_no_properties_is_none(self):
        assert extract('(n)').nodes[0].properties is None


class TestRelationships:

    def test_undeclared_target_is_label_less(self):
        pattern = extract('(a)-[:X]->(c)')
        assert pattern.node('c') == NodePattern('c', [])
        assert pattern.relationships[0].target == 'c'

    def test_default_type(self):
        assert extract('(a)-->(b)').relationships == [RelPattern(type='RELATED_TO', source='a', target='b')]

    @pytest.mark.parametrize('connector', ['->', '--', '-', '-[]->'])
    def test_shorthand_connectors(self, connector):
        pattern = extract(f'(a){connector}(b)')
        assert [(r.source, r.target) for r in pattern.relationships] == [('a', 'b')]

    def test_variable_and_properties(self):
        rel = extract('(a)-[r:ACTED_IN {role: "Neo"}]->(m)').relationships[0]
        assert rel == RelPattern(type='ACTED_IN', source='a', target='m', variable='r', properties={'role': 'Neo'})

    def test_left_pointing_arrow_swaps_direction(self):
        rel = extract('(a)<-[:DIRECTED]-(d)').relationships[0]
        assert (rel.source, rel.target) == ('d', 'a')

    def test_chain(self):
        pattern = extract('(a)-[:X]->(b)-[:Y]->(c)')
        assert [(r.type, r.source, r.target) for r in pattern.relationships] == [('X', 'a', 'b'), ('Y', 'b', 'c')]

    def test_separate_patterns_are_not_linked(self):
        assert extract('MATCH (a), (b) RETURN a').relationships == []

    def test_every_endpoint_is_a_node(self):
        pattern = extract('MATCH (a:A)-[:R]->(b)<-[:S]-(c:C) WHERE a.x = 1 RETURN b')
        variables = {node.variable for node in pattern.nodes}
        for rel in pattern.relationships:
            assert {rel.source, rel.target} <= variables


class TestRobustness:

    def test_comments_are_stripped_before_collapsing(self):
        query = 'MATCH (a:Person) // the (x:Ghost) here\n-[:KNOWS]->(b)'
        pattern = extract(query)
        assert [node.variable for node in pattern.nodes] == ['a', 'b']
        assert len(pattern.relationships) == 1

    @pytest.mark.parametrize('query', ['', 'not a query at all', '((((', '(a)-[:X', None, 42])
    def test_never_raises(self, query):
        pattern = extract(query)
        assert pattern.relationships == [] or pattern.nodes

    def test_deterministic(self):
        query = 'MATCH (a:Person {name: "Ada"})-[r:KNOWS]->(b) RETURN b'
        assert extract(query) == extract(query)

    def test_commas_inside_values_are_a_known_limitation(self):
        assert parse_properties('name: "Smith, John"') == {'name': '"Smith'}

    def test_slashes_inside_strings_start_a_comment(self):
        assert normalize_query('MATCH (s {url: "http://x"})\nRETURN s') == 'MATCH (s {url: "http: RETURN s'

    def test_normalize_collapses_whitespace(self):
        assert normalize_query('MATCH   (n)\n\tRETURN n') == 'MATCH (n) RETURN n'


class TestGraphView:

    def test_view(self):
        view = to_graph_view(extract('(a:Person)-[:KNOWS]->(b)'))

        assert [node['id'] for node in view['nodes']] == ['a', 'b']
        assert view['nodes'][0]['label'] == 'a:Person'
        assert view['nodes'][0]['color'] == color_for_label('Person')
        assert view['nodes'][1]['data']['label'] == 'Node'
        assert view['edges'] == [{
            'id': 'a-KNOWS->b',
            'source': 'a',
            'target': 'b',
            'label': 'KNOWS',
            'color': '#1890ff',
            'data': {
                'type': 'KNOWS',
                'properties': {}
            }
        }]

    def test_color_is_stable(self):
        assert color_for_label('Person') == color_for_label('Person')
        assert color_for_label('Person').startswith('#') and len(color_for_label('Person')) == 7
