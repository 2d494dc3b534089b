# domain/models/tool_schemas.py
from typing import Dict, Any, Optional, List
from pydantic import BaseModel, Field

# Field names follow the wire format of the tool interface (camelCase)

class NewTaskModel(BaseModel):
    title: str = Field(..., description="Short task title")
    description: str = Field(..., description="What needs to be done")

class RequestPlanningParams(BaseModel):
    originalRequest: str = Field(..., description="The user's original request")
    splitDetails: Optional[str] = Field(None, description="Why the request was split this way")
    tasks: List[NewTaskModel] = Field(..., description="Ordered tasks to complete the request")

class GetNextTaskParams(BaseModel):
    requestId: str = Field(..., description="Request identifier")

class MarkTaskDoneParams(BaseModel):
    requestId: str = Field(..., description="Request identifier")
    taskId: str = Field(..., description="Task identifier")
    completedDetails: Optional[str] = Field(None, description="Notes on how the task was completed")

class ApproveTaskCompletionParams(BaseModel):
    requestId: str = Field(..., description="Request identifier")
    taskId: str = Field(..., description="Task identifier")

class ApproveRequestCompletionParams(BaseModel):
    requestId: str = Field(..., description="Request identifier")

class OpenTaskDetailsParams(BaseModel):
    taskId: str = Field(..., description="Task identifier")

class ListRequestsParams(BaseModel):
    pass

class AddTasksToRequestParams(BaseModel):
    requestId: str = Field(..., description="Request identifier")
    tasks: List[NewTaskModel] = Field(..., description="Tasks to append to the request")

class UpdateTaskParams(BaseModel):
    requestId: str = Field(..., description="Request identifier")
    taskId: str = Field(..., description="Task identifier")
    title: Optional[str] = Field(None, description="New title, left unchanged when empty")
    description: Optional[str] = Field(None, description="New description, left unchanged when empty")

class DeleteTaskParams(BaseModel):
    requestId: str = Field(..., description="Request identifier")
    taskId: str = Field(..., description="Task identifier")

# Transport envelopes
class ToolCallParamsModel(BaseModel):
    name: str = Field(..., description="Registered tool name")
    arguments: Optional[Dict[str, Any]] = Field(None, description="Tool parameters")

class CallToolRequestModel(BaseModel):
    method: Optional[str] = Field(None, description="Protocol method, e.g. tools/call")
    params: ToolCallParamsModel

class ToolDescriptionModel(BaseModel):
    name: str
    description: str
    inputSchema: Dict[str, Any]

class ListToolsResponseModel(BaseModel):
    tools: List[ToolDescriptionModel]
