"""
HTTP triggers for workspace token callables.
"""

import azure.functions as func
from shared.callable import register_callable
from shared.context import AppContext
from .service import WorkspaceService


def register_workspace_routes(app: func.FunctionApp, context: AppContext):
    """Register all workspace token callables with the function app."""
    service = WorkspaceService()

    for operation in service.operations():
        register_callable(app, operation, context.authority)
