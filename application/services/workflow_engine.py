# application/services/workflow_engine.py
from typing import Dict, Any, Optional, List

from domain.exceptions import NotFoundError, InvalidStateError
from domain.models.workflow_state import Task, RequestEntry, WorkflowDocument
from domain.services.id_allocator import IdentifierAllocator
from domain.services.progress_rendering import (
    format_task_progress_table,
    format_requests_list,
    format_task_details,
)
from infrastructure.storage.document_store import DocumentStore, WORKFLOW_DOCUMENT_KEY
from shared.logging import logger, log_task_transition, log_document_persisted

class WorkflowEngine:
    """Request/task lifecycle with two-step (done, then approved) sign-off.

    The whole workflow lives in one document. It is loaded from the store on
    the first operation, mutated in memory, and saved after every mutating
    operation. There is no lock or version check between load and save, so two
    engines writing the same store concurrently lose all but the last save.
    A long-lived engine keeps serving its own copy until reload() is called.
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self.document = WorkflowDocument()
        self.allocator = IdentifierAllocator()
        self._loaded = False

    async def ensure_loaded(self):
        if not self._loaded:
            await self.reload()

    async def reload(self):
        """Replace the in-memory document with the stored one"""
        raw = await self.store.load(WORKFLOW_DOCUMENT_KEY)
        self.document = WorkflowDocument.from_dict(raw)
        self.allocator = IdentifierAllocator.from_document(self.document)
        self._loaded = True

        logger.debug("Workflow document loaded",
                     request_count=len(self.document.requests),
                     request_counter=self.allocator.request_counter,
                     task_counter=self.allocator.task_counter)

    async def _persist(self):
        await self.store.save(WORKFLOW_DOCUMENT_KEY, self.document.to_dict())
        log_document_persisted(
            document_key=WORKFLOW_DOCUMENT_KEY,
            request_count=len(self.document.requests),
            task_count=self.document.task_count()
        )

    def _require_request(self, request_id: str) -> RequestEntry:
        request = self.document.find_request(request_id)
        if not request:
            raise NotFoundError("Request not found")
        return request

    def _require_task(self, request: RequestEntry, task_id: str) -> Task:
        task = request.find_task(task_id)
        if not task:
            raise NotFoundError("Task not found")
        return task

    def _new_tasks(self, tasks: List[Dict[str, str]]) -> List[Task]:
        return [
            Task(
                id=self.allocator.next_task_id(),
                title=t["title"],
                description=t["description"]
            )
            for t in tasks
        ]

    async def plan_request(self, original_request: str, tasks: List[Dict[str, str]],
                           split_details: Optional[str] = None) -> Dict[str, Any]:
        """Register a new request together with its ordered tasks"""
        await self.ensure_loaded()

        request = RequestEntry(
            request_id=self.allocator.next_request_id(),
            original_request=original_request,
            split_details=split_details or "",
            tasks=self._new_tasks(tasks),
            completed=False
        )
        self.document.requests.append(request)

        await self._persist()

        logger.info("Request planned",
                    request_id=request.request_id,
                    task_ids=[t.id for t in request.tasks])

        return {
            "requestId": request.request_id,
            "message": "Request registered successfully.\n" + format_task_progress_table(request)
        }

    async def get_next_task(self, request_id: str) -> Dict[str, Any]:
        await self.ensure_loaded()
        request = self._require_request(request_id)

        next_task = request.next_pending_task()

        # Every task approved means none can be undone, so this check comes first
        if request.all_tasks_approved:
            return {
                "message": "All tasks are done! Awaiting request completion approval.\n"
                           + format_task_progress_table(request),
                "taskId": None,
                "allTasksDone": True
            }

        if not next_task:
            return {
                "message": "All tasks are done but some need approval.\n"
                           + format_task_progress_table(request),
                "taskId": None,
                "allTasksDone": False
            }

        return {
            "message": f"Next task: {next_task.title}\n{next_task.description}\n"
                       + format_task_progress_table(request),
            "taskId": next_task.id,
            "allTasksDone": False
        }

    async def mark_task_done(self, request_id: str, task_id: str,
                             completed_details: Optional[str] = None) -> Dict[str, Any]:
        await self.ensure_loaded()
        request = self._require_request(request_id)
        task = self._require_task(request, task_id)

        task.done = True
        if completed_details:
            task.completed_details = completed_details

        await self._persist()
        log_task_transition(request_id, task_id, "done")

        return {
            "message": "Task marked as done. Awaiting approval.\n" + format_task_progress_table(request)
        }

    async def approve_task_completion(self, request_id: str, task_id: str) -> Dict[str, Any]:
        await self.ensure_loaded()
        request = self._require_request(request_id)
        task = self._require_task(request, task_id)

        # Approval does not require the task to be marked done first
        if not task.done:
            logger.warning("Approving task that was never marked done",
                           request_id=request_id, task_id=task_id)

        was_done = task.done
        task.approved = True

        await self._persist()
        log_task_transition(request_id, task_id, "approved", was_done=was_done)

        return {
            "message": "Task completion approved.\n" + format_task_progress_table(request)
        }

    async def approve_request_completion(self, request_id: str) -> Dict[str, Any]:
        await self.ensure_loaded()
        request = self._require_request(request_id)

        if not request.all_tasks_approved:
            raise InvalidStateError("Not all tasks are approved yet")

        request.completed = True

        await self._persist()
        logger.info("Request completion approved", request_id=request_id)

        return {
            "message": "Request completion approved. All done!\n" + format_task_progress_table(request)
        }

    async def open_task_details(self, task_id: str) -> Dict[str, Any]:
        await self.ensure_loaded()

        task = self.document.find_task(task_id)
        if not task:
            raise NotFoundError("Task not found")

        return {"message": format_task_details(task)}

    async def list_requests(self) -> Dict[str, Any]:
        await self.ensure_loaded()
        return {"message": format_requests_list(self.document.requests)}

    async def add_tasks_to_request(self, request_id: str,
                                   tasks: List[Dict[str, str]]) -> Dict[str, Any]:
        await self.ensure_loaded()
        request = self._require_request(request_id)

        new_tasks = self._new_tasks(tasks)
        request.tasks.extend(new_tasks)
        # New work reopens the request even if it was approved complete
        request.completed = False

        await self._persist()
        logger.info("Tasks added to request",
                    request_id=request_id,
                    task_ids=[t.id for t in new_tasks])

        return {
            "message": "Tasks added to request.\n" + format_task_progress_table(request)
        }

    async def update_task(self, request_id: str, task_id: str,
                          title: Optional[str] = None,
                          description: Optional[str] = None) -> Dict[str, Any]:
        await self.ensure_loaded()
        request = self._require_request(request_id)
        task = self._require_task(request, task_id)

        if task.is_locked:
            raise InvalidStateError("Cannot update completed or approved tasks")

        # Empty strings mean "not supplied", never "clear the field"
        if title:
            task.title = title
        if description:
            task.description = description

        await self._persist()
        log_task_transition(request_id, task_id, "updated")

        return {
            "message": "Task updated successfully.\n" + format_task_progress_table(request)
        }

    async def delete_task(self, request_id: str, task_id: str) -> Dict[str, Any]:
        await self.ensure_loaded()
        request = self._require_request(request_id)
        task = self._require_task(request, task_id)

        if task.is_locked:
            raise InvalidStateError("Cannot delete completed or approved tasks")

        request.tasks.remove(task)

        await self._persist()
        log_task_transition(request_id, task_id, "deleted")

        return {
            "message": "Task deleted successfully.\n" + format_task_progress_table(request)
        }
