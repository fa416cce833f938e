"""Tests for AWS Lambda handler."""

import base64
import json

from lambda_handler import lambda_handler


class TestLambdaHandler:
    """Test the Lambda handler routes and responses."""

    def test_health_check(self):
        """GET /health returns healthy status."""
        event = {"httpMethod": "GET", "path": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "healthy"

    def test_api_info(self):
        """GET /api returns API information."""
        event = {"httpMethod": "GET", "path": "/api"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["status"] == "ok"
        assert "endpoints" in body

    def test_cors_preflight(self):
        """OPTIONS requests return CORS headers."""
        event = {"httpMethod": "OPTIONS", "path": "/quote"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert "Access-Control-Allow-Origin" in response["headers"]
        assert "Access-Control-Allow-Methods" in response["headers"]

    def test_not_found(self):
        """Unknown paths return 404."""
        event = {"httpMethod": "GET", "path": "/unknown"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 404

    def test_quote_success(self):
        """POST /quote prices a sale against the default tiers."""
        payload = {"sale_amount": 60000, "cumulative_volume": 200000, "sale_type": "TRUST"}
        event = {"httpMethod": "POST", "path": "/quote", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        body = json.loads(response["body"])
        assert body["total_percentage"] == 7.0
        assert body["commission_amount"] == 4200.0

    def test_quote_base64_body(self):
        """API Gateway may deliver the body base64 encoded."""
        payload = json.dumps({"sale_amount": 15000, "cumulative_volume": 0})
        event = {
            "httpMethod": "POST",
            "path": "/quote",
            "body": base64.b64encode(payload.encode("utf-8")).decode("utf-8"),
            "isBase64Encoded": True,
        }
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
        assert json.loads(response["body"])["commission_amount"] == 600.0

    def test_quote_empty_body(self):
        """POST /quote with empty body returns 400."""
        event = {"httpMethod": "POST", "path": "/quote", "body": ""}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert "error" in body

    def test_quote_invalid_json(self):
        """POST /quote with invalid JSON returns 400."""
        event = {"httpMethod": "POST", "path": "/quote", "body": "not valid json"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert "error" in body

    def test_quote_validation_error(self):
        """POST /quote with a negative amount returns 400."""
        payload = {"sale_amount": -500, "cumulative_volume": 0}
        event = {"httpMethod": "POST", "path": "/quote", "body": json.dumps(payload)}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 400
        body = json.loads(response["body"])
        assert body["status"] == "validation_failed"

    def test_http_api_format(self):
        """Supports HTTP API v2 event format."""
        event = {"requestContext": {"http": {"method": "GET"}}, "rawPath": "/health"}
        response = lambda_handler(event, None)

        assert response["statusCode"] == 200
