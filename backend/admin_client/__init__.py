"""Python client for the College CMS admin API."""
from admin_client.client import AdminApiClient, ApiError
from admin_client.session import BearerAuth, FileTokenStore, TokenStore

__all__ = ["AdminApiClient", "ApiError", "BearerAuth", "FileTokenStore", "TokenStore"]
