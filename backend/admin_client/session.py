"""
Session token storage and per-request credential injection.

The token is read from the store each time a request is prepared, so a
login, logout or refresh takes effect on the next call without touching
shared session headers.
"""
import json
import logging
import os
from pathlib import Path
from typing import Optional, Union

from requests.auth import AuthBase

logger = logging.getLogger(__name__)


class TokenStore:
    """In-memory token holder."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore(TokenStore):
    """Token persisted to a JSON file so it survives process restarts."""

    def __init__(self, path: Union[str, Path]):
        super().__init__()
        self.path = Path(path)

    def get(self) -> Optional[str]:
        if not self.path.exists():
            return None
        try:
            return json.loads(self.path.read_text()).get("token")
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable token file {self.path}: {e}")
            return None

    def set(self, token: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"token": token}))
        os.chmod(self.path, 0o600)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class BearerAuth(AuthBase):
    """Adds `Authorization: Bearer <token>` from the store to each request."""

    def __init__(self, store: TokenStore):
        self.store = store

    def __call__(self, request):
        token = self.store.get()
        if token:
            request.headers["Authorization"] = f"Bearer {token}"
        return request
