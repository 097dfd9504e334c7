"""Tests for the action classifier."""

import pytest

from graphquery.models.core import EntitySearch, Invalid, PropertiesSearch, RelatedEntitiesSearch, Stop
from graphquery.services.action_classifier import classify, parse_related_entities


class TestStop:

    @pytest.mark.parametrize('text', ['stop', 'STOP', '  Stop  ', '\nsToP\t'])
    def test_stop_is_case_and_whitespace_insensitive(self, text):
        assert classify(text) == Stop()

    def test_stop_inside_sentence_is_invalid(self):
        assert isinstance(classify('I will STOP now'), Invalid)


class TestSearchMarkers:

    def test_entity_search(self):
        assert classify('Entity Search: Marie Curie') == EntitySearch(term='Marie Curie')

    def test_entity_search_after_preamble(self):
        """Entity markers may appear after free text."""
        action = classify('Let me look that up.\nEntity Search:  radium ')
        assert action == EntitySearch(term='radium')

    def test_properties_search(self):
        assert classify('Properties Search: abc123') == PropertiesSearch(entity_id='abc123')

    def test_entity_marker_wins_over_properties_marker(self):
        action = classify('Properties Search: x\nEntity Search: y')
        assert isinstance(action, EntitySearch)
        assert action.term == 'y'

    def test_tail_search(self):
        action = classify('Tail Search: abc123, KNOWS')
        assert isinstance(action, RelatedEntitiesSearch)
        assert action.entity_id == 'abc123'
        assert action.relationship_type == 'KNOWS'
        assert action.is_well_formed

    def test_tail_search_must_lead_the_reply(self):
        """Unlike the other markers, a tail search after a preamble is not recognized."""
        action = classify('Next I will do a Tail Search: abc123, KNOWS')
        assert isinstance(action, Invalid)

    def test_tail_search_leading_whitespace_is_trimmed(self):
        assert isinstance(classify('   Tail Search: a, B'), RelatedEntitiesSearch)

    def test_markers_are_case_sensitive(self):
        assert isinstance(classify('entity search: foo'), Invalid)

    def test_unrecognized_reply_keeps_raw_text(self):
        action = classify('I think the answer is 42.')
        assert action == Invalid(raw_text='I think the answer is 42.')

    def test_empty_reply_is_invalid(self):
        assert isinstance(classify(''), Invalid)


class TestRelatedEntitiesPayload:

    def test_missing_comma_is_recognized_but_malformed(self):
        action = classify('Tail Search: abc123')
        assert isinstance(action, RelatedEntitiesSearch)
        assert not action.is_well_formed
        assert action.entity_id is None

    def test_too_many_commas_is_malformed(self):
        assert not parse_related_entities('a, B, C').is_well_formed

    def test_empty_field_is_malformed(self):
        assert not parse_related_entities('abc123, ').is_well_formed

    def test_fields_are_trimmed(self):
        action = parse_related_entities('  abc123 ,  KNOWS ')
        assert (action.entity_id, action.relationship_type) == ('abc123', 'KNOWS')
