"""
Textboard Backend - Azure Functions Application

Callable functions for managing texts and their comments inside a
workspace. Every callable checks the caller's identity token and workspace
token before touching storage, and answers with a standard envelope.
"""

import azure.functions as func
import datetime
import json
import logging
import os

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the main Function App instance
app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

from shared.context import build_context
from texts.routes import register_text_routes
from comments.routes import register_comment_routes
from workspaces.routes import register_workspace_routes

SERVICE_NAME = "Textboard Backend"
SERVICE_VERSION = "1.0.0"

context = build_context()

# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.route(route="health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint to verify the Azure Function is running."""
    logger.info("Health check endpoint called.")

    health_status = {
        "status": "healthy",
        "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "environment": os.environ.get("AZURE_FUNCTIONS_ENVIRONMENT", "Development")
    }

    return func.HttpResponse(
        json.dumps(health_status),
        status_code=200,
        mimetype="application/json"
    )

# =============================================================================
# Callables
# =============================================================================

register_workspace_routes(app, context)
register_text_routes(app, context)
register_comment_routes(app, context)
