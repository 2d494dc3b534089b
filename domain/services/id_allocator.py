# domain/services/id_allocator.py
import re
from typing import Iterable, Optional
from domain.models.workflow_state import WorkflowDocument

REQUEST_PREFIX = "req-"
TASK_PREFIX = "task-"

def parse_identifier_suffix(identifier: str, prefix: str) -> Optional[int]:
    """Return N for '<prefix>N', or None when the id is malformed"""
    match = re.fullmatch(re.escape(prefix) + r"(\d+)", identifier or "")
    if not match:
        return None
    return int(match.group(1))

def _max_suffix(identifiers: Iterable[str], prefix: str) -> int:
    suffixes = [
        n for n in (parse_identifier_suffix(i, prefix) for i in identifiers)
        if n is not None
    ]
    return max(suffixes) if suffixes else 0

class IdentifierAllocator:
    """Hands out req-N / task-N ids above the highest one already present.

    Counters are a cache derived from the document, never persisted on their
    own. Malformed ids left behind by hand edits are skipped.
    """

    def __init__(self, request_counter: int = 0, task_counter: int = 0):
        self.request_counter = request_counter
        self.task_counter = task_counter

    @classmethod
    def from_document(cls, document: WorkflowDocument) -> "IdentifierAllocator":
        request_ids = [r.request_id for r in document.requests]
        task_ids = [t.id for r in document.requests for t in r.tasks]
        return cls(
            request_counter=_max_suffix(request_ids, REQUEST_PREFIX),
            task_counter=_max_suffix(task_ids, TASK_PREFIX),
        )

    def next_request_id(self) -> str:
        self.request_counter += 1
        return f"{REQUEST_PREFIX}{self.request_counter}"

    def next_task_id(self) -> str:
        self.task_counter += 1
        return f"{TASK_PREFIX}{self.task_counter}"
