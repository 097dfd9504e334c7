"""
Classify a model reply into one of the search actions of the query building workflow.
"""

from typing import Callable, List, Tuple

from ..models.core import EntitySearch, Invalid, PropertiesSearch, RelatedEntitiesSearch, SearchAction, Stop

STOP_KEYWORD = 'STOP'
ENTITY_SEARCH_PREFIX = 'Entity Search:'
PROPERTIES_SEARCH_PREFIX = 'Properties Search:'
TAIL_SEARCH_PREFIX = 'Tail Search:'


def _contains(text: str, marker: str) -> bool:
    return marker in text


def _starts_with(text: str, marker: str) -> bool:
    return text.startswith(marker)


def parse_related_entities(payload: str) -> RelatedEntitiesSearch:
    """Split an ``<entity_id>, <relationship_type>`` payload.

    Anything other than exactly one comma with two non-empty sides yields a
    malformed action rather than an error.
    """
    parts = [part.strip() for part in payload.split(',')]
    if len(parts) != 2 or not all(parts):
        return RelatedEntitiesSearch(payload=payload)
    return RelatedEntitiesSearch(payload=payload, entity_id=parts[0], relationship_type=parts[1])


# Checked in order; the first match wins. Entity and properties markers may follow a
# preamble, a tail search must open the reply.
MATCHERS: List[Tuple[str, Callable[[str, str], bool], Callable[[str], SearchAction]]] = [
    (ENTITY_SEARCH_PREFIX, _contains, EntitySearch),
    (PROPERTIES_SEARCH_PREFIX, _contains, PropertiesSearch),
    (TAIL_SEARCH_PREFIX, _starts_with, parse_related_entities),
]


def classify(text: str) -> SearchAction:
    """Classify a model reply.

    Args:
        text: Raw assistant reply

    Returns:
        The matching SearchAction; ``Invalid`` when nothing matches
    """
    stripped = (text or '').strip()
    if stripped.upper() == STOP_KEYWORD:
        return Stop()

    for marker, matches, build in MATCHERS:
        if matches(stripped, marker):
            payload = stripped.partition(marker)[2].strip()
            return build(payload)

    return Invalid(raw_text=text or '')
