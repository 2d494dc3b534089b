# infrastructure/web/tool_api.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from application.services.tool_dispatcher import ToolDispatcher
from domain.exceptions import WorkflowError
from domain.models.tool_schemas import CallToolRequestModel, ListToolsResponseModel
from shared.logging import logger

router = APIRouter(tags=["tools"])

async def get_dispatcher(request: Request) -> ToolDispatcher:
    # Installed by the application lifespan; decides per-request vs shared engine
    return request.app.state.dispatcher_factory()

def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})

@router.post("/list-tools", response_model=ListToolsResponseModel)
async def list_tools(dispatcher: ToolDispatcher = Depends(get_dispatcher)):
    """List registered tools with their parameter schemas; any request body is ignored"""
    return {"tools": dispatcher.list_tools()}

@router.post("/call-tool")
async def call_tool(
    request: Request,
    dispatcher: ToolDispatcher = Depends(get_dispatcher)
):
    """Invoke a tool by name"""

    # Read the body by hand so malformed input gets the {error} shape, not a 422
    try:
        body = await request.json()
    except ValueError as e:
        return _error_response(400, f"Invalid parameters: request body is not valid JSON ({e})")

    try:
        envelope = CallToolRequestModel.model_validate(body)
    except ValidationError as e:
        return _error_response(400, f"Invalid parameters: {e}")

    tool_name = envelope.params.name
    try:
        return await dispatcher.execute(tool_name, envelope.params.arguments or {})
    except WorkflowError as e:
        return _error_response(400, str(e))
    except Exception as e:
        logger.error("Tool call crashed", tool_name=tool_name, error=str(e))
        return _error_response(500, f"Failed to call tool: {str(e)}")
