"""
Admin session client.

Keeps the admin token on disk between runs and attaches it as a bearer
credential to every request made against the admin API.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Any

import httpx

from admin_backend.client.errors import AdminApiError, error_for_status
from admin_backend.core import config

logger = logging.getLogger(__name__)


class TokenStore:
    """
    File-backed storage for the admin session.

    The file holds ``{"token": ..., "admin": {...}}`` and is only readable
    by its owner.
    """

    def __init__(self, path: Path | None = None):
        self.path = Path(path or config.ADMIN_SESSION_FILE)

    def load(self) -> dict | None:
        if not self.path.exists():
            return None
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load admin session from {self.path}: {e}")
            return None
        if not isinstance(data, dict) or not data.get('token'):
            return None
        return data

    def save(self, token: str, admin: dict | None = None) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, 'w') as f:
            json.dump({'token': token, 'admin': admin}, f, indent=2)
        self.path.chmod(0o600)

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()

    @property
    def token(self) -> str | None:
        data = self.load()
        return data['token'] if data else None


class AdminSessionClient:
    """
    HTTP client for the admin API.

    Args:
        base_url: API root, e.g. ``http://localhost:3000/api``
        token_store: Where the session token is kept
        http_client: Pre-built ``httpx.Client`` (its own base URL is used)
    """

    def __init__(
        self,
        base_url: str | None = None,
        token_store: TokenStore | None = None,
        http_client: httpx.Client | None = None,
        timeout: float = 10.0,
    ):
        self.token_store = token_store or TokenStore()
        self.http = http_client or httpx.Client(base_url=base_url or config.ADMIN_API_BASE_URL, timeout=timeout)

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "AdminSessionClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _headers(self) -> dict[str, str]:
        token = self.token_store.token
        return {'Authorization': f'Bearer {token}'} if token else {}

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.status_code < 400:
            return
        try:
            message = response.json().get('message') or response.reason_phrase
        except (ValueError, AttributeError):
            message = response.text or response.reason_phrase
        raise error_for_status(response.status_code, message)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = {**self._headers(), **kwargs.pop('headers', {})}
        response = self.http.request(method, path, headers=headers, **kwargs)
        self._raise_for_error(response)
        return response.json()

    # Session

    def login(self, email: str, password: str) -> dict:
        data = self._request('POST', '/admin/login', json={'email': email, 'password': password})
        self.token_store.save(data['token'], data['admin'])
        logger.info(f"Logged in as {data['admin'].get('email')}")
        return data['admin']

    def logout(self) -> None:
        try:
            if self.token_store.token:
                self._request('POST', '/admin/logout')
        except AdminApiError as e:
            logger.warning(f"Server-side logout failed: {e.message}")
        finally:
            self.token_store.clear()

    def restore_session(self) -> dict | None:
        """Return the stored admin if its token is still accepted, else forget it."""
        session = self.token_store.load()
        if not session or not session.get('admin'):
            return None
        try:
            return self.me()
        except AdminApiError as e:
            logger.info(f"Stored admin session rejected: {e.message}")
            self.token_store.clear()
            return None

    def me(self) -> dict:
        return self._request('GET', '/admin/me')

    # Accounts

    def list_users(self, role: str | None = None) -> list[dict]:
        params = {'role': role} if role else None
        return self._request('GET', '/admin/users', params=params)['users']

    def set_blocked(self, uid: str, is_blocked: bool) -> str:
        return self._request('PATCH', f'/admin/users/{uid}/block', json={'isBlocked': is_blocked})['message']

    # Tutor applications

    def list_tutor_applications(self, status: str | None = None) -> list[dict]:
        params = {'status': status} if status else None
        return self._request('GET', '/admin/tutor-applications', params=params)['applications']

    def review_application(self, application_id: str, status: str) -> str:
        return self._request(
            'PATCH',
            f'/admin/tutor-applications/{application_id}/status',
            json={'status': status},
        )['message']

    # Bookings

    def list_bookings(self, status: str | None = None) -> list[dict]:
        params = {'status': status} if status else None
        return self._request('GET', '/admin/bookings', params=params)['bookings']

    def delete_booking(self, booking_id: str) -> str:
        return self._request('DELETE', f'/admin/bookings/{booking_id}')['message']

    # Dashboard

    def dashboard(self, year: int | None = None) -> dict:
        params = {'year': year} if year is not None else None
        return self._request('GET', '/admin/dashboard', params=params)

    def stream_dashboard(self, year: int | None = None) -> Iterator[dict]:
        """Yield dashboard summaries as the server pushes them."""
        params = {'year': year} if year is not None else None
        with self.http.stream(
            'GET',
            '/admin/dashboard/stream',
            params=params,
            headers=self._headers(),
            timeout=None,
        ) as response:
            if response.status_code >= 400:
                response.read()
                self._raise_for_error(response)
            yield from parse_event_stream(response.iter_lines())


def parse_event_stream(lines) -> Iterator[dict]:
    """Decode ``data:`` payloads of a server-sent event stream."""
    buffer: list[str] = []
    for line in lines:
        if not line:
            if buffer:
                yield json.loads('\n'.join(buffer))
                buffer = []
            continue
        if line.startswith('data:'):
            buffer.append(line[len('data:'):].lstrip())
    if buffer:
        yield json.loads('\n'.join(buffer))
