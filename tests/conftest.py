# tests/conftest.py
import pytest

from application.services.tool_dispatcher import ToolDispatcher
from application.services.workflow_engine import WorkflowEngine
from infrastructure.storage.document_store import InMemoryDocumentStore

@pytest.fixture
def store():
    """Fresh in-memory document store per test"""
    return InMemoryDocumentStore()

@pytest.fixture
def engine(store):
    return WorkflowEngine(store)

@pytest.fixture
def dispatcher(engine):
    return ToolDispatcher(engine)

@pytest.fixture
def two_tasks():
    return [
        {"title": "A", "description": "First step"},
        {"title": "B", "description": "Second step"},
    ]
