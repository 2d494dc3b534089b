# domain/exceptions.py
from typing import Any, Dict, List, Optional

class WorkflowError(Exception):
    """Base class for failures surfaced to tool callers"""
    pass

class NotFoundError(WorkflowError):
    pass

class InvalidStateError(WorkflowError):
    pass

class InvalidParametersError(WorkflowError):
    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.errors = errors or []

class UnknownToolError(WorkflowError):
    pass
