"""
Info handler for the GET /info route.

Packaged as lambda/main.py.zip and entered at main.info_handler. Invoked by
API Gateway through an AWS_PROXY integration, so it must return a complete
HTTP response (statusCode, headers, body).
"""

import json
import logging
import os
from datetime import datetime, timezone

logger = logging.getLogger()
logger.setLevel(os.environ.get("LOG_LEVEL", "INFO"))


def info_handler(event, context):
    """
    Return information about the request and the function serving it.

    Args:
        event: API Gateway HTTP API proxy event (payload v1.0 or v2.0)
        context: Lambda context object

    Returns:
        dict: API Gateway proxy response
    """
    event = event or {}
    request_context = event.get("requestContext") or {}
    http = request_context.get("http") or {}

    body = {
        "message": "Hello from the info handler",
        "method": http.get("method") or event.get("httpMethod"),
        "path": http.get("path") or event.get("rawPath") or event.get("path"),
        "stage": request_context.get("stage"),
        "request_id": request_context.get("requestId"),
        "source_ip": http.get("sourceIp")
        or (request_context.get("identity") or {}).get("sourceIp"),
        "function_name": getattr(context, "function_name", None),
        "function_version": getattr(context, "function_version", None),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    logger.info("Serving info request %s", body["request_id"])

    return {
        "statusCode": 200,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(body),
    }
