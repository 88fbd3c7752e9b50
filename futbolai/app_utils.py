from typing import Any, Dict, Optional

from flask import jsonify

from .errors import APIError


def _build_success_payload(data: Optional[Any], message: str) -> Dict[str, Any]:
    return {
        "status": "ok",
        "message": message,
        "data": data,
    }


def _build_error_payload(error: Any, message: str) -> Dict[str, Any]:
    return {
        "status": "error",
        "message": message,
        "error": error,
    }


def make_ok(data: Optional[Any] = None, message: str = "success", status_code: int = 200):
    """Return a standardized success response."""
    response = jsonify(_build_success_payload(data, message))
    return response, status_code


def make_error(error: Any, message: str = "An error occurred", status_code: int = 400):
    """Return a standardized error response. APIError instances are serialized via to_dict()."""
    if isinstance(error, APIError):
        error = error.to_dict()
    response = jsonify(_build_error_payload(error, message))
    return response, status_code
