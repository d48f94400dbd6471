"""
Admin API client.

Mirrors the admin panel's session behavior: the token lives in a TokenStore,
every call carries it through BearerAuth, and any 401 clears the store and
fires the `on_logout` callback.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

import requests

from admin_client.session import BearerAuth, TokenStore

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status: int, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message
        self.errors = errors or []


class AdminApiClient:
    def __init__(
        self,
        base_url: str,
        store: Optional[TokenStore] = None,
        on_logout: Optional[Callable[[], None]] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
    ):
        self.base_url = base_url.rstrip("/")
        self.store = store or TokenStore()
        self.on_logout = on_logout
        self.session = session or requests.Session()
        self.auth = BearerAuth(self.store)
        self.timeout = timeout
        self.admin: Optional[Dict[str, Any]] = None

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}/api/{path.lstrip('/')}"
        response = self.session.request(method, url, auth=self.auth, timeout=self.timeout, **kwargs)

        try:
            body = response.json()
        except ValueError:
            body = {"message": response.text or response.reason}

        if response.status_code == 401:
            self.logout()
        if not response.ok:
            raise ApiError(response.status_code, body.get("message", "Request failed"), body.get("errors"))
        return body

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def login(self, username: str, password: str) -> Dict[str, Any]:
        body = self._request("POST", "admin/auth/login", json={"username": username, "password": password})
        data = body["data"]
        self.store.set(data["token"])
        self.admin = data["admin"]
        logger.info(f"Signed in as {self.admin.get('username')}")
        return self.admin

    def logout(self) -> None:
        was_signed_in = self.store.get() is not None or self.admin is not None
        self.store.clear()
        self.admin = None
        if was_signed_in and self.on_logout:
            self.on_logout()

    def restore(self) -> Optional[Dict[str, Any]]:
        """Validate a stored token by loading the profile; any failure logs out."""
        if not self.store.get():
            return None
        try:
            return self.profile()
        except (ApiError, requests.RequestException) as e:
            logger.info(f"Stored session rejected: {e}")
            self.logout()
            return None

    def profile(self) -> Dict[str, Any]:
        self.admin = self._request("GET", "admin/auth/profile")["data"]
        return self.admin

    def change_password(self, current_password: str, new_password: str) -> None:
        self._request(
            "PUT",
            "admin/auth/change-password",
            json={"currentPassword": current_password, "newPassword": new_password},
        )

    def refresh(self) -> str:
        token = self._request("POST", "admin/auth/refresh")["data"]["token"]
        self.store.set(token)
        return token

    # ------------------------------------------------------------------
    # Resources (news, gallery, faculty, admissions, examinations,
    # activities, videos, roll-numbers, contacts)
    # ------------------------------------------------------------------

    def list(self, resource: str, **params) -> Dict[str, Any]:
        body = self._request("GET", f"admin/{resource}", params=params)
        return {"items": body.get("items", []), "pagination": body.get("pagination", {})}

    def get(self, resource: str, item_id: str) -> Dict[str, Any]:
        return self._request("GET", f"admin/{resource}/{item_id}")["data"]

    def create(self, resource: str, data: Dict[str, Any], files=None) -> Dict[str, Any]:
        if files:
            return self._request("POST", f"admin/{resource}", data=data, files=files)["data"]
        return self._request("POST", f"admin/{resource}", json=data)["data"]

    def update(self, resource: str, item_id: str, data: Dict[str, Any], files=None) -> Dict[str, Any]:
        if files:
            return self._request("PUT", f"admin/{resource}/{item_id}", data=data, files=files)["data"]
        return self._request("PUT", f"admin/{resource}/{item_id}", json=data)["data"]

    def delete(self, resource: str, item_id: str) -> Dict[str, Any]:
        return self._request("DELETE", f"admin/{resource}/{item_id}").get("data", {})

    def toggle_published(self, resource: str, item_id: str) -> Dict[str, Any]:
        return self._request("PATCH", f"admin/{resource}/{item_id}/toggle-published")["data"]

    def toggle_featured(self, resource: str, item_id: str) -> Dict[str, Any]:
        return self._request("PATCH", f"admin/{resource}/{item_id}/toggle-featured")["data"]

    def bulk_delete(self, resource: str, ids: List[str]) -> int:
        body = self._request("POST", f"admin/{resource}/bulk-delete", json={"ids": ids})
        return body["data"]["deletedCount"]
