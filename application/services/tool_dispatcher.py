# application/services/tool_dispatcher.py
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Any, Optional, List, Callable, Awaitable, Type

from pydantic import BaseModel, ValidationError

from application.services.workflow_engine import WorkflowEngine
from domain.exceptions import WorkflowError, InvalidParametersError, UnknownToolError
from domain.models.tool_schemas import (
    RequestPlanningParams,
    GetNextTaskParams,
    MarkTaskDoneParams,
    ApproveTaskCompletionParams,
    ApproveRequestCompletionParams,
    OpenTaskDetailsParams,
    ListRequestsParams,
    AddTasksToRequestParams,
    UpdateTaskParams,
    DeleteTaskParams,
)
from shared.logging import log_tool_call

class ToolName(str, Enum):
    REQUEST_PLANNING = "request_planning"
    GET_NEXT_TASK = "get_next_task"
    MARK_TASK_DONE = "mark_task_done"
    APPROVE_TASK_COMPLETION = "approve_task_completion"
    APPROVE_REQUEST_COMPLETION = "approve_request_completion"
    OPEN_TASK_DETAILS = "open_task_details"
    LIST_REQUESTS = "list_requests"
    ADD_TASKS_TO_REQUEST = "add_tasks_to_request"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"

ToolHandler = Callable[[Any], Awaitable[Dict[str, Any]]]

@dataclass(frozen=True)
class ToolDefinition:
    name: ToolName
    description: str
    params_model: Type[BaseModel]
    handler: ToolHandler

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name.value,
            "description": self.description,
            "inputSchema": self.params_model.model_json_schema()
        }

class ToolDispatcher:
    """Validates tool payloads and routes them to the workflow engine"""

    def __init__(self, engine: WorkflowEngine):
        self.engine = engine
        self.tools: Dict[str, ToolDefinition] = {
            definition.name.value: definition for definition in self._build_definitions()
        }

    def _build_definitions(self) -> List[ToolDefinition]:
        engine = self.engine
        return [
            ToolDefinition(
                ToolName.REQUEST_PLANNING,
                "Register a new user request and plan its associated tasks.",
                RequestPlanningParams,
                lambda p: engine.plan_request(
                    p.originalRequest, [t.model_dump() for t in p.tasks], p.splitDetails
                ),
            ),
            ToolDefinition(
                ToolName.GET_NEXT_TASK,
                "Get the next pending task for a request.",
                GetNextTaskParams,
                lambda p: engine.get_next_task(p.requestId),
            ),
            ToolDefinition(
                ToolName.MARK_TASK_DONE,
                "Mark a task as completed.",
                MarkTaskDoneParams,
                lambda p: engine.mark_task_done(p.requestId, p.taskId, p.completedDetails),
            ),
            ToolDefinition(
                ToolName.APPROVE_TASK_COMPLETION,
                "Approve a completed task.",
                ApproveTaskCompletionParams,
                lambda p: engine.approve_task_completion(p.requestId, p.taskId),
            ),
            ToolDefinition(
                ToolName.APPROVE_REQUEST_COMPLETION,
                "Approve the completion of an entire request.",
                ApproveRequestCompletionParams,
                lambda p: engine.approve_request_completion(p.requestId),
            ),
            ToolDefinition(
                ToolName.OPEN_TASK_DETAILS,
                "Get details of a specific task.",
                OpenTaskDetailsParams,
                lambda p: engine.open_task_details(p.taskId),
            ),
            ToolDefinition(
                ToolName.LIST_REQUESTS,
                "List all requests in the system.",
                ListRequestsParams,
                lambda p: engine.list_requests(),
            ),
            ToolDefinition(
                ToolName.ADD_TASKS_TO_REQUEST,
                "Add new tasks to an existing request.",
                AddTasksToRequestParams,
                lambda p: engine.add_tasks_to_request(
                    p.requestId, [t.model_dump() for t in p.tasks]
                ),
            ),
            ToolDefinition(
                ToolName.UPDATE_TASK,
                "Update an existing task.",
                UpdateTaskParams,
                lambda p: engine.update_task(
                    p.requestId, p.taskId, title=p.title, description=p.description
                ),
            ),
            ToolDefinition(
                ToolName.DELETE_TASK,
                "Delete a task from a request.",
                DeleteTaskParams,
                lambda p: engine.delete_task(p.requestId, p.taskId),
            ),
        ]

    def list_tools(self) -> List[Dict[str, Any]]:
        return [definition.describe() for definition in self.tools.values()]

    async def dispatch(self, name: str, parameters: Optional[Any] = None) -> Dict[str, Any]:
        """Validate and run a tool; raises WorkflowError subclasses on failure"""
        definition = self.tools.get(name)
        if not definition:
            raise UnknownToolError(f"Unknown tool: {name}")

        try:
            params = definition.params_model.model_validate(
                parameters if parameters is not None else {}
            )
        except ValidationError as e:
            raise InvalidParametersError(f"Invalid parameters: {e}", errors=e.errors())

        return await definition.handler(params)

    async def execute(self, name: str, parameters: Optional[Any] = None) -> Dict[str, Any]:
        """Dispatch with timing and outcome logging; workflow errors are re-raised"""
        start_time = time.monotonic()
        try:
            result = await self.dispatch(name, parameters)
        except WorkflowError as e:
            log_tool_call(name, False, self._elapsed_ms(start_time), error_message=str(e))
            raise

        log_tool_call(name, True, self._elapsed_ms(start_time))
        return result

    async def call_tool(self, name: str, parameters: Optional[Any] = None) -> Dict[str, Any]:
        """Run a tool, reporting workflow failures as {"error": message}"""
        try:
            return await self.execute(name, parameters)
        except WorkflowError as e:
            return {"error": str(e)}

    @staticmethod
    def _elapsed_ms(start_time: float) -> int:
        return int((time.monotonic() - start_time) * 1000)
