# tests/unit/domain/services/test_progress_rendering.py
from domain.models.workflow_state import Task, RequestEntry
from domain.services.progress_rendering import (
    format_task_progress_table,
    format_requests_list,
    format_task_details
)

def _request():
    return RequestEntry(
        request_id="req-1",
        original_request="Ship release",
        tasks=[
            Task(id="task-1", title="Build", description="Compile", done=True, approved=True),
            Task(id="task-2", title="Test", description="Run suite", done=True),
            Task(id="task-3", title="Tag", description="Push tag"),
        ]
    )

def test_task_progress_table_rows_in_order_with_glyphs():
    table = format_task_progress_table(_request())

    assert table == (
        "Task Progress:\n"
        "| Status | Task | Description |\n"
        "|--------|------|-------------|\n"
        "| ✅ | Build | Compile |\n"
        "| ⏳ | Test | Run suite |\n"
        "| ❌ | Tag | Push tag |\n"
    )

def test_requests_list_counts_approved_tasks_only():
    other = RequestEntry(request_id="req-2", original_request="Empty")

    output = format_requests_list([_request(), other])

    lines = output.splitlines()
    assert lines[0] == "Requests:"
    assert lines[1] == "| ID | Original Request | Tasks Done | Total Tasks |"
    assert lines[3] == "| req-1 | Ship release | 1 | 3 |"
    assert lines[4] == "| req-2 | Empty | 0 | 0 |"

def test_requests_list_with_no_requests_has_header_only():
    assert len(format_requests_list([]).splitlines()) == 3

def test_task_details_include_completion_details_when_present():
    task = Task(id="task-2", title="Test", description="Run suite",
                done=True, completed_details="All green")

    details = format_task_details(task)

    assert details.splitlines() == [
        "Task Details:",
        "ID: task-2",
        "Title: Test",
        "Description: Run suite",
        "Status: Done",
        "Completion Details: All green",
    ]

def test_task_details_without_completion_details():
    details = format_task_details(Task(id="task-3", title="Tag", description="Push tag"))

    assert "Status: Pending" in details
    assert "Completion Details" not in details
