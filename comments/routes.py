"""
HTTP triggers for comment callables.
"""

import azure.functions as func
from shared.callable import register_callable
from shared.context import AppContext
from .service import CommentService


def register_comment_routes(app: func.FunctionApp, context: AppContext):
    """Register all comment callables with the function app."""
    service = CommentService(context.comments)

    for operation in service.operations():
        register_callable(app, operation, context.authority)
