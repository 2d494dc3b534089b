# domain/models/workflow_state.py
from dataclasses import dataclass, field
from typing import Dict, Any, Optional, List
from enum import Enum

class TaskStatus(Enum):
    PENDING = "pending"
    DONE = "done"
    APPROVED = "approved"

TASK_KEYS = ("id", "title", "description", "done", "approved", "completedDetails")
REQUEST_KEYS = ("requestId", "originalRequest", "splitDetails", "tasks", "completed")

def _text(value: Any) -> str:
    """Missing and null values read as empty text"""
    return "" if value is None else str(value)

def _flag(value: Any) -> bool:
    # Only a real JSON true counts; "false", 1 or "yes" do not
    return value is True

def _unknown_keys(raw: Dict[str, Any], known) -> Dict[str, Any]:
    return {key: value for key, value in raw.items() if key not in known}

@dataclass
class Task:
    """Single unit of work inside a request"""
    id: str
    title: str
    description: str
    done: bool = False
    approved: bool = False
    completed_details: str = ""
    # Fields written by other tools, carried through untouched on save
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def status(self) -> TaskStatus:
        if self.approved:
            return TaskStatus.APPROVED
        if self.done:
            return TaskStatus.DONE
        return TaskStatus.PENDING

    @property
    def is_locked(self) -> bool:
        """Done or approved tasks can no longer be edited or deleted"""
        return self.done or self.approved

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "done": self.done,
            "approved": self.approved,
            "completedDetails": self.completed_details,
        })
        return data

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Task":
        return cls(
            id=_text(raw.get("id")),
            title=_text(raw.get("title")),
            description=_text(raw.get("description")),
            done=_flag(raw.get("done")),
            approved=_flag(raw.get("approved")),
            completed_details=_text(raw.get("completedDetails")),
            extra=_unknown_keys(raw, TASK_KEYS),
        )

@dataclass
class RequestEntry:
    """User request decomposed into an ordered list of tasks"""
    request_id: str
    original_request: str
    split_details: str = ""
    tasks: List[Task] = field(default_factory=list)
    completed: bool = False
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    def find_task(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def next_pending_task(self) -> Optional[Task]:
        for task in self.tasks:
            if not task.done:
                return task
        return None

    @property
    def all_tasks_approved(self) -> bool:
        return all(task.approved for task in self.tasks)

    @property
    def approved_count(self) -> int:
        return sum(1 for task in self.tasks if task.approved)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data.update({
            "requestId": self.request_id,
            "originalRequest": self.original_request,
            "splitDetails": self.split_details,
            "tasks": [task.to_dict() for task in self.tasks],
            "completed": self.completed,
        })
        return data

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "RequestEntry":
        return cls(
            request_id=_text(raw.get("requestId")),
            original_request=_text(raw.get("originalRequest")),
            split_details=_text(raw.get("splitDetails")),
            tasks=[Task.from_dict(t) for t in raw.get("tasks") or [] if isinstance(t, dict)],
            completed=_flag(raw.get("completed")),
            extra=_unknown_keys(raw, REQUEST_KEYS),
        )

@dataclass
class WorkflowDocument:
    """Aggregate root persisted as one document"""
    requests: List[RequestEntry] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    def find_request(self, request_id: str) -> Optional[RequestEntry]:
        for request in self.requests:
            if request.request_id == request_id:
                return request
        return None

    def find_task(self, task_id: str) -> Optional[Task]:
        for request in self.requests:
            task = request.find_task(task_id)
            if task:
                return task
        return None

    def task_count(self) -> int:
        return sum(len(request.tasks) for request in self.requests)

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.extra)
        data["requests"] = [request.to_dict() for request in self.requests]
        return data

    @classmethod
    def from_dict(cls, raw: Optional[Dict[str, Any]]) -> "WorkflowDocument":
        if not raw:
            return cls()
        return cls(
            requests=[
                RequestEntry.from_dict(r)
                for r in raw.get("requests") or []
                if isinstance(r, dict)
            ],
            extra=_unknown_keys(raw, ("requests",)),
        )
