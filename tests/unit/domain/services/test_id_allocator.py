# tests/unit/domain/services/test_id_allocator.py
import pytest

from domain.models.workflow_state import WorkflowDocument
from domain.services.id_allocator import IdentifierAllocator, parse_identifier_suffix

@pytest.mark.parametrize("identifier,prefix,expected", [
    ("req-1", "req-", 1),
    ("req-042", "req-", 42),
    ("task-17", "task-", 17),
    ("task-", "task-", None),
    ("task-abc", "task-", None),
    ("task-12abc", "task-", None),
    ("task--3", "task-", None),
    ("req-5", "task-", None),
    ("", "req-", None),
])
def test_parse_identifier_suffix(identifier, prefix, expected):
    assert parse_identifier_suffix(identifier, prefix) == expected

class TestIdentifierAllocator:

    def test_empty_document_starts_at_one(self):
        allocator = IdentifierAllocator.from_document(WorkflowDocument())

        assert allocator.next_request_id() == "req-1"
        assert allocator.next_task_id() == "task-1"
        assert allocator.next_task_id() == "task-2"

    def test_counters_derived_from_highest_existing_ids(self):
        document = WorkflowDocument.from_dict({
            "requests": [
                {"requestId": "req-3", "tasks": [{"id": "task-2"}, {"id": "task-11"}]},
                {"requestId": "req-7", "tasks": [{"id": "task-5"}]},
            ]
        })

        allocator = IdentifierAllocator.from_document(document)

        assert allocator.request_counter == 7
        assert allocator.task_counter == 11
        assert allocator.next_request_id() == "req-8"
        assert allocator.next_task_id() == "task-12"

    def test_malformed_ids_are_ignored(self):
        document = WorkflowDocument.from_dict({
            "requests": [
                {"requestId": "req-oops", "tasks": [{"id": "task-x"}, {"id": "task-4"}]},
                {"requestId": "custom", "tasks": [{"id": ""}]},
            ]
        })

        allocator = IdentifierAllocator.from_document(document)

        assert allocator.next_request_id() == "req-1"
        assert allocator.next_task_id() == "task-5"

    def test_task_counter_is_global_not_per_request(self):
        document = WorkflowDocument.from_dict({
            "requests": [
                {"requestId": "req-1", "tasks": [{"id": "task-9"}]},
                {"requestId": "req-2", "tasks": []},
            ]
        })

        allocator = IdentifierAllocator.from_document(document)

        assert allocator.next_task_id() == "task-10"
