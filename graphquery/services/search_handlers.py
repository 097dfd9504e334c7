"""
Graph lookups behind the Entity, Properties and Tail search actions.

Every handler answers with guidance text for the model. Store failures and bad
arguments are reported back as text so the workflow can keep going.
"""

import json
import re
from typing import Any, Dict, List

from ..models.core import (SYSTEM, ChatTurn, EntitySearch, PropertiesSearch, QueryFailure, QuerySuccess,
                           RelatedEntitiesSearch, SearchAction)
from ..utils.logging_config import get_logger
from .prompts import (KG_NAME, STAGE_ENTITY_SEARCH, STAGE_PROPERTY_SEARCH, STAGE_TAIL_SEARCH,
                      TAIL_SEARCH_FORMAT_MESSAGE)
from .query_executor import QueryExecutor

logger = get_logger(__name__)

ENTITY_LABEL = '__Entity__'

# Relationship types cannot be passed as parameters, so they are interpolated after this check
RELATIONSHIP_TYPE_PATTERN = re.compile(r'[A-Za-z0-9_]+')

ENTITY_SEARCH_QUERY = """
MATCH (e:{label})
WHERE e.id CONTAINS $searchTerm OR e.description CONTAINS $searchTerm
RETURN e.id AS entityId, e.description AS description
LIMIT {limit}
"""

PROPERTIES_SEARCH_QUERY = """
MATCH (e:{label} {{id: $entityId}})
RETURN properties(e) AS properties
LIMIT 1
"""

RELATED_ENTITIES_QUERY = """
MATCH (e1:{label} {{id: $entityId}})-[r:{relationship_type}]->(e2:{label})
RETURN e2.id AS relatedEntityId, e2.description AS description
LIMIT {limit}
"""


class SearchFormatError(Exception):
    """Raised when a search action carries arguments of the wrong shape."""
    pass


def is_valid_relationship_type(relationship_type: str) -> bool:
    return bool(RELATIONSHIP_TYPE_PATTERN.fullmatch(relationship_type or ''))


def build_related_entities_query(relationship_type: str, limit: int = 5) -> str:
    """Build the tail search query for one relationship type.

    Raises:
        SearchFormatError: If the type contains anything but letters, digits and underscores
    """
    if not is_valid_relationship_type(relationship_type):
        raise SearchFormatError(f'Invalid relationship type "{relationship_type}". '
                                'Relationship types may only contain letters, digits and underscores.')
    return RELATED_ENTITIES_QUERY.format(label=ENTITY_LABEL, relationship_type=relationship_type, limit=int(limit))


def _records(outcome: QuerySuccess) -> List[Dict[str, Any]]:
    return [dict(zip(outcome.columns, row)) for row in outcome.rows]


def _format_property_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


class SearchHandlers:
    """Dispatch search actions to the graph and phrase the outcome for the model."""

    def __init__(self, executor: QueryExecutor, limit: int = 5):
        self.executor = executor
        self.limit = int(limit)

    def handle(self, action: SearchAction) -> ChatTurn:
        """Run the search for an action and wrap the answer in a system turn."""
        if isinstance(action, EntitySearch):
            return ChatTurn(role=SYSTEM, content=self.entity_search(action.term), stage=STAGE_ENTITY_SEARCH)
        if isinstance(action, PropertiesSearch):
            return ChatTurn(role=SYSTEM, content=self.properties_search(action.entity_id), stage=STAGE_PROPERTY_SEARCH)
        if isinstance(action, RelatedEntitiesSearch):
            return ChatTurn(role=SYSTEM, content=self.related_entities_search(action), stage=STAGE_TAIL_SEARCH)
        raise TypeError(f'Not a search action: {action!r}')

    def entity_search(self, term: str) -> str:
        query = ENTITY_SEARCH_QUERY.format(label=ENTITY_LABEL, limit=self.limit)
        outcome = self.executor.execute(query, {'searchTerm': term})
        if isinstance(outcome, QueryFailure):
            return f'Error searching for entities: {outcome.message}'

        records = _records(outcome)
        if not records:
            logger.debug(f'Entity search found nothing for {term!r}')
            return (f'{KG_NAME} did not find any entities matching "{term}". '
                    'You may need to rephrase or simplify your entity search')

        entities_text = '\n'.join(f"{record.get('entityId')}: {record.get('description') or 'No description'}"
                                  for record in records)
        return f'Found entities in {KG_NAME}:\n{entities_text}'

    def properties_search(self, entity_id: str) -> str:
        query = PROPERTIES_SEARCH_QUERY.format(label=ENTITY_LABEL)
        outcome = self.executor.execute(query, {'entityId': entity_id})
        if isinstance(outcome, QueryFailure):
            return f'Error getting properties for entity: {outcome.message}'

        records = _records(outcome)
        if not records:
            return f'{KG_NAME} did not find any entity with ID "{entity_id}". Are you sure that entity exists?'

        properties = records[0].get('properties') or {}
        if not isinstance(properties, dict):
            properties = {'value': properties}
        properties_text = '\n'.join(f'{key}: {_format_property_value(value)}' for key, value in properties.items())
        return f'Properties for entity {entity_id}:\n{properties_text}'

    def related_entities_search(self, action: RelatedEntitiesSearch) -> str:
        if not action.is_well_formed:
            logger.warning(f'Malformed tail search payload: {action.payload!r}')
            return TAIL_SEARCH_FORMAT_MESSAGE

        entity_id, relationship_type = action.entity_id, action.relationship_type
        try:
            query = build_related_entities_query(relationship_type, self.limit)
        except SearchFormatError as e:
            logger.warning(f'Rejected relationship type {relationship_type!r}')
            return str(e)

        outcome = self.executor.execute(query, {'entityId': entity_id})
        if isinstance(outcome, QueryFailure):
            return f'Error finding related entities: {outcome.message}'

        records = _records(outcome)
        if not records:
            return (f'{KG_NAME} did not find any entities connected to "{entity_id}" via "{relationship_type}" '
                    'relationship. Are you sure that entity has that relationship?')

        related_text = '\n'.join(f"{record.get('relatedEntityId')}: {record.get('description') or 'No description'}"
                                 for record in records)
        return f'Related entities via {relationship_type}:\n{related_text}'
