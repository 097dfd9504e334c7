"""
Core data models for the graph query building workflow.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

# Chat roles
SYSTEM = 'system'
USER = 'user'
ASSISTANT = 'assistant'


@dataclass(frozen=True)
class ChatTurn:
    """A single message exchanged with the chat transport.

    The stage is a label for observability and history only; nothing branches on it.
    """
    role: str  # system, user or assistant
    content: str
    stage: str = ''


@dataclass(frozen=True)
class EntitySearch:
    """Fuzzy lookup of entities whose id or description contains the term."""
    term: str


@dataclass(frozen=True)
class PropertiesSearch:
    """Lookup of the property map of a single entity."""
    entity_id: str


@dataclass(frozen=True)
class RelatedEntitiesSearch:
    """Lookup of outgoing neighbours of an entity through one relationship type.

    When the payload does not split into exactly two non-empty fields the action
    is still recognized, but ``entity_id`` and ``relationship_type`` are None and
    the handler answers with a format error.
    """
    payload: str
    entity_id: Optional[str] = None
    relationship_type: Optional[str] = None

    @property
    def is_well_formed(self) -> bool:
        return bool(self.entity_id) and bool(self.relationship_type)


@dataclass(frozen=True)
class Stop:
    """The model is done searching."""
    pass


@dataclass(frozen=True)
class Invalid:
    """A reply matching none of the known actions."""
    raw_text: str


SearchAction = Union[EntitySearch, PropertiesSearch, RelatedEntitiesSearch, Stop, Invalid]


class FailureKind(str, Enum):
    """Why a query could not produce a result."""
    STORE_UNREACHABLE = 'store_unreachable'
    STORE_EXECUTION_ERROR = 'store_execution_error'


@dataclass(frozen=True)
class QuerySummary:
    """Execution summary reported by the graph store."""
    query: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    counters: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class QuerySuccess:
    """Tabular output of a successful query, rows aligned to columns."""
    columns: List[str]
    rows: List[List[Any]]
    summary: QuerySummary

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class QueryFailure:
    """A failed query; only the error message crosses the executor boundary."""
    kind: FailureKind
    message: str

    @property
    def ok(self) -> bool:
        return False


QueryOutcome = Union[QuerySuccess, QueryFailure]


class BindingType(str, Enum):
    """Inferred type of a normalized result cell."""
    URI = 'uri'
    STRING = 'string'
    NUMBER = 'number'
    BOOLEAN = 'boolean'
    OBJECT = 'object'
    UNKNOWN = 'unknown'


@dataclass(frozen=True)
class Binding:
    """One normalized result cell; value is always the serialized form."""
    type: BindingType
    value: str

    def to_dict(self) -> Dict[str, str]:
        return {'type': self.type.value, 'value': self.value}


@dataclass
class BindingsResult:
    """Variable bindings for a whole result set."""
    variables: List[str]
    bindings: List[Dict[str, Binding]]

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the ``head``/``results`` layout consumed by result views."""
        return {
            'head': {
                'vars': list(self.variables)
            },
            'results': {
                'bindings': [{name: binding.to_dict() for name, binding in row.items()} for row in self.bindings]
            }
        }
