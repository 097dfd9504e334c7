"""
Normalize tabular query results into typed variable bindings.
"""

import json
from enum import Enum
from typing import Any, Callable, Dict, List

from ..models.core import Binding, BindingsResult, BindingType, QuerySuccess
from ..utils.logging_config import get_logger

logger = get_logger(__name__)

# Keys that mark a mapping as a node or relationship rather than a plain value map
ENTITY_MARKERS = frozenset({
    'labels', '_labels', '~labels',
    'element_id', 'elementId', 'identity', '_id', '~id',
    '_type', '~type',
})


class CellShape(Enum):
    NULL = 'null'
    ENTITY = 'entity'
    OBJECT = 'object'
    BOOLEAN = 'boolean'
    NUMBER = 'number'
    STRING = 'string'
    OTHER = 'other'


def cell_shape(value: Any) -> CellShape:
    """Tag a cell with one of the recognized shapes."""
    if value is None:
        return CellShape.NULL
    if isinstance(value, dict):
        return CellShape.ENTITY if ENTITY_MARKERS.intersection(value.keys()) else CellShape.OBJECT
    if isinstance(value, (list, tuple, set, frozenset)):
        return CellShape.OBJECT
    # bool is an int subclass, so it is checked first
    if isinstance(value, bool):
        return CellShape.BOOLEAN
    if isinstance(value, (int, float)):
        return CellShape.NUMBER
    if isinstance(value, str):
        return CellShape.STRING
    return CellShape.OTHER


def _to_text(value: Any) -> str:
    """str(), then repr(), then the type name; never raises."""
    for render in (str, repr):
        try:
            return render(value)
        except Exception:
            continue
    return f'<{type(value).__name__}>'


def _to_json(value: Any) -> str:
    try:
        if isinstance(value, (set, frozenset)):
            value = sorted(value, key=str)
        return json.dumps(value, separators=(',', ':'), ensure_ascii=False, default=str)
    except Exception as e:
        # Unserializable, too deeply nested, or a __str__ that raises
        logger.debug(f'Falling back to text for {type(value).__name__} cell: {e.__class__.__name__}')
        return _to_text(value)


SHAPE_HANDLERS: Dict[CellShape, Callable[[Any], Binding]] = {
    CellShape.NULL: lambda value: Binding(BindingType.UNKNOWN, ''),
    CellShape.ENTITY: lambda value: Binding(BindingType.URI, _to_json(value)),
    CellShape.OBJECT: lambda value: Binding(BindingType.OBJECT, _to_json(value)),
    CellShape.BOOLEAN: lambda value: Binding(BindingType.BOOLEAN, 'true' if value else 'false'),
    CellShape.NUMBER: lambda value: Binding(BindingType.NUMBER, _to_text(value)),
    CellShape.STRING: lambda value: Binding(BindingType.STRING, value),
    CellShape.OTHER: lambda value: Binding(BindingType.STRING, _to_text(value)),
}


def to_binding(value: Any) -> Binding:
    """Normalize one cell. Total: every value maps to exactly one Binding."""
    return SHAPE_HANDLERS[cell_shape(value)](value)


def to_bindings(outcome: QuerySuccess) -> BindingsResult:
    """Convert a successful query outcome into variable bindings.

    Args:
        outcome: Successful query outcome

    Returns:
        BindingsResult with the outcome's columns as variables and one mapping per row
    """
    variables = list(outcome.columns)
    bindings: List[Dict[str, Binding]] = []
    for row in outcome.rows:
        cells = list(row) + [None] * (len(variables) - len(row))
        bindings.append({name: to_binding(cells[index]) for index, name in enumerate(variables)})
    return BindingsResult(variables=variables, bindings=bindings)


def format_bindings_as_text(result: BindingsResult) -> str:
    """Render bindings as a plain-text table for prompts."""
    if not result.bindings:
        return 'The query returned no results.'

    lines = [' | '.join(result.variables), ' | '.join('---' for _ in result.variables)]
    for row in result.bindings:
        lines.append(' | '.join(row[name].value if name in row else '' for name in result.variables))
    return '\n'.join(lines)
