"""Pytest configuration and fixtures for graphquery tests."""

from typing import Any, Callable, Dict, List, Optional, Sequence

import pytest

from graphquery.models.core import ASSISTANT, ChatTurn
from graphquery.services.query_executor import QueryExecutor
from graphquery.utils.graph_store import GraphStore, RawResult


class FakeChatClient:
    """Chat client replying from a script; the last reply repeats once the script runs out."""

    def __init__(self, replies: Sequence[str]):
        self.replies = list(replies)
        self.sent: List[List[ChatTurn]] = []

    @property
    def round_trips(self) -> int:
        return len(self.sent)

    def send_messages(self, turns: Sequence[ChatTurn]) -> ChatTurn:
        self.sent.append(list(turns))
        index = min(len(self.sent) - 1, len(self.replies) - 1)
        return ChatTurn(role=ASSISTANT, content=self.replies[index], stage=turns[-1].stage)


class FakeGraphStore(GraphStore):
    """In-memory graph store answering queries through a callable."""

    def __init__(self, responder: Optional[Callable[[str, Dict[str, Any]], RawResult]] = None, connected: bool = True):
        self.responder = responder or (lambda query, params: RawResult(columns=[], records=[]))
        self._connected = connected
        self.calls: List[tuple] = []

    @property
    def connected(self) -> bool:
        return self._connected

    def run_query(self, query: str, params: Optional[Dict[str, Any]] = None) -> RawResult:
        self.calls.append((query, dict(params or {})))
        return self.responder(query, params or {})

    def close(self) -> None:
        self._connected = False


def rows(columns: List[str], *values: Sequence[Any]) -> RawResult:
    """Build a RawResult from positional row values."""
    return RawResult(columns=columns, records=[dict(zip(columns, row)) for row in values],
                     summary={'query': '', 'parameters': {}, 'counters': {}})


@pytest.fixture
def fake_store() -> FakeGraphStore:
    return FakeGraphStore()


@pytest.fixture
def executor(fake_store: FakeGraphStore) -> QueryExecutor:
    return QueryExecutor(fake_store)
