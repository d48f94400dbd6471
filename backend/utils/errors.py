"""
Error taxonomy shared by every route.

Each error carries the HTTP status it maps to; the handlers registered in
server.py turn them into the uniform JSON body:

    {"success": false, "message": "...", "errors": [...]}
"""
from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for errors that map directly onto an HTTP response."""
    status_code = 500
    default_message = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
        detail: Optional[str] = None,
    ):
        self.message = message or self.default_message
        self.errors = errors or []
        self.detail = detail
        super().__init__(self.message)

    def to_dict(self, include_detail: bool = False) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": False, "message": self.message}
        if self.errors:
            body["errors"] = self.errors
        if include_detail and self.detail:
            body["error"] = self.detail
        return body


class ValidationError(AppError):
    """Malformed or missing fields (400)."""
    status_code = 400
    default_message = "Validation error"


class AuthenticationError(AppError):
    """Missing, invalid or expired credentials (401)."""
    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(AppError):
    """Authenticated but lacking the required privilege (403)."""
    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class RateLimitError(AppError):
    status_code = 429
    default_message = "Too many requests, please try again later."

    def __init__(self, message: Optional[str] = None, retry_after: int = 0):
        super().__init__(message)
        self.retry_after = max(int(retry_after), 0)


class UpstreamError(AppError):
    """Database or media host failure. Detail is logged, never shown in production."""
    status_code = 500
    default_message = "Service temporarily unavailable"


def field_errors_from_pydantic(errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten pydantic/FastAPI error dicts into [{field, message}]."""
    flattened = []
    for err in errors:
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        flattened.append({
            "field": ".".join(loc) or None,
            "message": err.get("msg", "Invalid value"),
        })
    return flattened


def from_pydantic(exc, message: str = "Validation error") -> ValidationError:
    """Wrap a pydantic ValidationError raised outside FastAPI's own parsing."""
    return ValidationError(message, errors=field_errors_from_pydantic(exc.errors()))
