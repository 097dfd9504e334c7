"""Tests for result binding normalization."""

import json

import pytest

from graphquery.models.core import Binding, BindingsResult, BindingType, QuerySuccess, QuerySummary
from graphquery.services.binding_normalizer import format_bindings_as_text, to_binding, to_bindings


def success(columns, rows):
    return QuerySuccess(columns=columns, rows=rows, summary=QuerySummary(query=''))


class TestToBinding:

    def test_mixed_row(self):
        result = to_bindings(success(['a', 'b', 'c'], [[None, 'x', {'labels': ['Person']}]]))

        assert result.variables == ['a', 'b', 'c']
        assert result.bindings == [{
            'a': Binding(BindingType.UNKNOWN, ''),
            'b': Binding(BindingType.STRING, 'x'),
            'c': Binding(BindingType.URI, '{"labels":["Person"]}'),
        }]

    @pytest.mark.parametrize('value', [
        {'element_id': '4:abc:1', 'labels': [], 'properties': {}},
        {'~id': '1', '~entityType': 'node', '~labels': ['Person']},
        {'_type': 'KNOWS'},
        {'identity': 7},
    ])
    def test_graph_entities_are_uris(self, value):
        assert to_binding(value).type == BindingType.URI

    def test_plain_map_is_object(self):
        binding = to_binding({'name': 'Ada', 'type': 'person'})
        assert binding.type == BindingType.OBJECT
        assert json.loads(binding.value) == {'name': 'Ada', 'type': 'person'}

    def test_list_is_object(self):
        assert to_binding([1, 2]) == Binding(BindingType.OBJECT, '[1,2]')

    def test_booleans_are_not_numbers(self):
        assert to_binding(True) == Binding(BindingType.BOOLEAN, 'true')
        assert to_binding(False) == Binding(BindingType.BOOLEAN, 'false')

    def test_numbers(self):
        assert to_binding(3) == Binding(BindingType.NUMBER, '3')
        assert to_binding(2.5) == Binding(BindingType.NUMBER, '2.5')

    def test_unrecognized_scalar_is_string(self):
        class Opaque:
            def __str__(self):
                return 'opaque'

        assert to_binding(Opaque()) == Binding(BindingType.STRING, 'opaque')

    def test_unserializable_object_does_not_raise(self):
        cyclic = {'a': []}
        cyclic['a'].append(cyclic)
        binding = to_binding(cyclic)
        assert binding.type == BindingType.OBJECT
        assert binding.value

    def test_short_row_is_padded_with_unknown(self):
        result = to_bindings(success(['a', 'b'], [['x']]))
        assert result.bindings[0]['b'] == Binding(BindingType.UNKNOWN, '')

    def test_deeply_nested_list(self):
        nested = []
        for _ in range(100000):
            nested = [nested]
        binding = to_binding(nested)
        assert binding.type == BindingType.OBJECT
        assert binding.value

    def test_unprintable_values(self):
        class Unprintable:

            def __str__(self):
                raise RuntimeError('no str')

        inside_map = to_binding({'k': Unprintable()})
        assert inside_map.type == BindingType.OBJECT
        assert 'Unprintable' in inside_map.value

        alone = to_binding(Unprintable())
        assert alone.type == BindingType.STRING
        assert 'Unprintable' in alone.value


class TestSerialization:

    def test_to_dict_layout(self):
        result = to_bindings(success(['n'], [[1]]))
        assert result.to_dict() == {
            'head': {
                'vars': ['n']
            },
            'results': {
                'bindings': [{
                    'n': {
                        'type': 'number',
                        'value': '1'
                    }
                }]
            }
        }

    def test_format_as_text(self):
        text = format_bindings_as_text(to_bindings(success(['name', 'age'], [['Ada', 36]])))
        assert text.splitlines() == ['name | age', '--- | ---', 'Ada | 36']

    def test_format_empty(self):
        assert 'no results' in format_bindings_as_text(BindingsResult(variables=['n'], bindings=[]))
