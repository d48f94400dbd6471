from fastapi import Request
from typing import Optional
import logging

from auth import decode_access_token
from utils.errors import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

def get_bearer_token(request: Request) -> Optional[str]:
    """Extract the bearer token from the Authorization header."""
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None

    token = auth_header[len("Bearer "):].strip()
    return token or None

async def require_admin(request: Request) -> dict:
    """Gate admin routes: valid, unexpired token carrying the admin flag."""
    token = get_bearer_token(request)
    if not token:
        raise AuthenticationError("Access denied. No token provided.")

    payload = decode_access_token(token)
    if not payload:
        logger.info(f"Rejected invalid or expired token on {request.url.path}")
        raise AuthenticationError("Invalid token.")

    if not payload.get("isAdmin"):
        raise AuthorizationError("Access denied. Admin privileges required.")

    request.state.admin = payload
    return payload
