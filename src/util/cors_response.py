"""CORS response utility for HTTP functions."""

from typing import Dict, Any
from flask import Response, jsonify
from firebase_functions import https_fn

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Max-Age": "3600",
}


def preflight_response(req: https_fn.Request, allowed_methods: list | None = None) -> Response | None:
    """Build the response to a CORS preflight request.

    Args:
        req: Firebase HTTP request object
        allowed_methods: List of allowed HTTP methods

    Returns:
        204 response for OPTIONS requests, None otherwise
    """
    if req.method != "OPTIONS":
        return None

    methods = allowed_methods or ["GET", "POST", "OPTIONS"]
    response = Response("", status=204)
    for key, value in CORS_HEADERS.items():
        response.headers[key] = value
    response.headers["Access-Control-Allow-Methods"] = ", ".join(methods)
    return response


def add_cors_headers(response: Response) -> Response:
    """Add CORS headers to a response.

    Args:
        response: Flask response object

    Returns:
        Response with CORS headers added
    """
    response.headers["Access-Control-Allow-Origin"] = CORS_HEADERS["Access-Control-Allow-Origin"]
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = CORS_HEADERS["Access-Control-Allow-Headers"]
    return response


def create_cors_response(data: Dict[str, Any], status: int = 200) -> Response:
    """Create a JSON response with CORS headers.

    Args:
        data: Response data dictionary
        status: HTTP status code

    Returns:
        Flask response with CORS headers
    """
    response = jsonify(data)
    response.status_code = status
    return add_cors_headers(response)
