"""
AWS Lambda handler for the Salesboard commission quote API.

Lambda invocations share no storage, so this entry point only exposes the
stateless commission quote. For the full dashboard API use main.py (Flask).
"""

import json
import logging
import os

from salesboard.tracker import quote_commission_from_dict

# Configure logging
logger = logging.getLogger()
logger.setLevel(logging.INFO)

# Environment (dev, staging, prod)
ENVIRONMENT = os.environ.get("ENVIRONMENT", "dev")

# CORS headers for API Gateway
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
}


def lambda_handler(event, context):
    """
    Main Lambda entry point.

    Handles API Gateway events for:
    - GET /health
    - GET /api
    - POST /quote
    - OPTIONS (CORS preflight)
    """
    http_method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "")
    if http_method == "OPTIONS":
        return {"statusCode": 200, "headers": CORS_HEADERS, "body": ""}

    # Supports both REST API and HTTP API formats
    path = event.get("path") or event.get("rawPath", "")

    if path == "/health" and http_method == "GET":
        return handle_health()
    elif path == "/quote" and http_method == "POST":
        return handle_quote(event)
    elif path == "/api" and http_method == "GET":
        return handle_api_info()
    else:
        return respond(404, {"error": "Not found", "path": path})


def respond(status_code, body):
    return {"statusCode": status_code, "headers": CORS_HEADERS, "body": json.dumps(body)}


def handle_health():
    """Health check endpoint."""
    return respond(200, {"status": "healthy", "environment": ENVIRONMENT})


def handle_api_info():
    """API information endpoint."""
    return respond(200, {
        "status": "ok",
        "message": "Salesboard Commission API",
        "version": "1.0",
        "environment": ENVIRONMENT,
        "runtime": "AWS Lambda",
        "endpoints": {"quote": "/quote [POST]", "health": "/health [GET]"},
    })


def handle_quote(event):
    """Quote the commission and FDI figures for a prospective sale."""
    try:
        body = event.get("body", "")
        if isinstance(body, str):
            if not body:
                return respond(400, {"error": "No input data provided", "status": "failed"})
            # Handle base64 encoded body (API Gateway)
            if event.get("isBase64Encoded"):
                import base64

                body = base64.b64decode(body).decode("utf-8")
            input_data = json.loads(body)
        else:
            input_data = body

        logger.info(f"Quoting sale amount: {input_data.get('sale_amount', 'Unknown')}")

        result = quote_commission_from_dict(input_data)

        logger.info(f"Quote complete: {result['total_percentage']}% = {result['commission_amount']}")

        return respond(200, result)

    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {str(e)}")
        return respond(400, {"error": f"Invalid JSON: {str(e)}", "status": "failed"})

    except (ValueError, KeyError, TypeError) as e:
        # Validation errors from engine (missing fields, invalid types, etc.)
        logger.error(f"Validation error: {str(e)}")
        return respond(400, {"error": f"Validation error: {str(e)}", "status": "validation_failed"})

    except Exception as e:
        # Unexpected errors - log details but return generic message to avoid information disclosure
        logger.error(f"Unexpected processing error: {str(e)}", exc_info=True)
        return respond(500, {"error": "An unexpected error occurred during processing", "status": "failed"})
