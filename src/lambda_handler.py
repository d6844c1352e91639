"""AWS Lambda handler for API Gateway events.

The application is built once per container at cold start and reused by every
invocation that container serves. Mangum adapts API Gateway events to ASGI.
"""

import json
import logging
import os
from typing import Any

from mangum import Mangum

from main import create_application

logger = logging.getLogger(__name__)

# Build the app and Mangum adapter at cold start (skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    app = create_application()
    mangum_handler = Mangum(app, lifespan="off")
else:
    app = None  # type: ignore
    mangum_handler = None  # type: ignore


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point for API Gateway requests.

    Args:
        event: The API Gateway event payload
        context: The Lambda context object

    Returns:
        API Gateway response dict with statusCode and body
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    try:
        result: dict[str, Any] = mangum_handler(event, context)
        return result

    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "headers": {"content-type": "application/json"},
            "body": json.dumps({"error": "Something went wrong!", "details": str(e)}),
        }
