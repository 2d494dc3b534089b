# main.py
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from application.services.tool_dispatcher import ToolDispatcher
from application.services.workflow_engine import WorkflowEngine
from infrastructure.storage.document_store import (
    DocumentStore,
    InMemoryDocumentStore,
    PostgresDocumentStore,
)
from infrastructure.web.tool_api import router as tool_router
from shared.config import Settings
from shared.logging import logger, setup_logging

SERVICE_VERSION = "1.0.0"

# Global application state
app_state = {}

async def create_document_store(settings: Settings) -> DocumentStore:
    if settings.storage_backend == "postgres":
        store = PostgresDocumentStore(settings.database_url)
        await store.initialize()
        return store
    logger.warning("Using in-memory document store; workflow state is lost on restart")
    return InMemoryDocumentStore()

def build_dispatcher_factory(store: DocumentStore, engine_mode: str) -> Callable[[], ToolDispatcher]:
    """Fresh engine per invocation, or one long-lived engine shared by all invocations"""
    if engine_mode == "shared":
        shared_dispatcher = ToolDispatcher(WorkflowEngine(store))
        return lambda: shared_dispatcher
    return lambda: ToolDispatcher(WorkflowEngine(store))

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""

    settings = Settings.from_env()
    setup_logging(level=settings.log_level, json_logs=settings.json_logs)

    logger.info("Starting Request Workflow Service",
                storage_backend=settings.storage_backend,
                engine_mode=settings.engine_mode)

    try:
        store = await create_document_store(settings)
        app_state["store"] = store
        app.state.dispatcher_factory = build_dispatcher_factory(store, settings.engine_mode)
        logger.info("Application initialized successfully")
    except Exception as e:
        logger.error("Failed to initialize application", error=str(e))
        raise

    yield

    logger.info("Shutting down Request Workflow Service")

    if "store" in app_state:
        await app_state["store"].close()

app = FastAPI(
    title="Request Workflow Service",
    description="Request planning and task approval workflow exposed as callable tools",
    version=SERVICE_VERSION,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(tool_router)

@app.get("/health")
async def health_check():
    """System health check"""

    try:
        await app_state["store"].ping()
        return {
            "status": "healthy",
            "storage": "connected",
            "version": SERVICE_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    except Exception as e:
        logger.error("Health check failed", error=str(e))
        return {
            "status": "unhealthy",
            "error": str(e),
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "service": "Request Workflow Service",
        "description": "Requests are split into ordered tasks; each task is marked done, "
                       "then approved, before the request can be approved complete",
        "endpoints": {
            "list_tools": "POST /list-tools",
            "call_tool": "POST /call-tool",
            "health_check": "GET /health"
        }
    }

if __name__ == "__main__":
    import uvicorn

    settings = Settings.from_env()
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload
    )
