# domain/services/progress_rendering.py
from typing import Dict, Iterable
from domain.models.workflow_state import RequestEntry, Task, TaskStatus

STATUS_GLYPHS: Dict[TaskStatus, str] = {
    TaskStatus.APPROVED: "✅",
    TaskStatus.DONE: "⏳",
    TaskStatus.PENDING: "❌",
}

STATUS_LABELS: Dict[TaskStatus, str] = {
    TaskStatus.APPROVED: "Approved",
    TaskStatus.DONE: "Done",
    TaskStatus.PENDING: "Pending",
}

def format_task_progress_table(request: RequestEntry) -> str:
    """Markdown table of the request's tasks, in processing order"""
    table = "Task Progress:\n"
    table += "| Status | Task | Description |\n"
    table += "|--------|------|-------------|\n"
    for task in request.tasks:
        table += f"| {STATUS_GLYPHS[task.status]} | {task.title} | {task.description} |\n"
    return table

def format_requests_list(requests: Iterable[RequestEntry]) -> str:
    output = "Requests:\n"
    output += "| ID | Original Request | Tasks Done | Total Tasks |\n"
    output += "|-----|-----------------|------------|-------------|\n"
    for request in requests:
        output += (
            f"| {request.request_id} | {request.original_request} | "
            f"{request.approved_count} | {len(request.tasks)} |\n"
        )
    return output

def format_task_details(task: Task) -> str:
    lines = [
        "Task Details:",
        f"ID: {task.id}",
        f"Title: {task.title}",
        f"Description: {task.description}",
        f"Status: {STATUS_LABELS[task.status]}",
    ]
    if task.completed_details:
        lines.append(f"Completion Details: {task.completed_details}")
    return "\n".join(lines)
