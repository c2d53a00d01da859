"""
HTTP triggers for text callables.
"""

import azure.functions as func
from shared.callable import register_callable
from shared.context import AppContext
from .service import TextService


def register_text_routes(app: func.FunctionApp, context: AppContext):
    """Register all text callables with the function app."""
    service = TextService(context.texts)

    for operation in service.operations():
        register_callable(app, operation, context.authority)
