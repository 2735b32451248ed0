"""
HTTP client for the event API.

Every call takes its credentials from the Session passed to the constructor;
nothing is read from module-level state.
"""

import logging
from typing import Optional, Dict, Any, List

import requests

from client.session import Session

DEFAULT_TIMEOUT = 10


class ApiRequestError(Exception):
    """A non-2xx answer from the API, carrying the server's message."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class ApiClient:
    def __init__(self, base_url: str, session: Session, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session
        self.timeout = timeout

    def _request(self, method: str, path: str, auth: bool = False, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if auth:
            if not self.session.is_authenticated:
                raise ApiRequestError(401, "Not logged in")
            headers["Authorization"] = f"Bearer {self.session.token}"

        response = requests.request(
            method,
            f"{self.base_url}{path}",
            headers=headers,
            timeout=self.timeout,
            **kwargs,
        )

        try:
            body = response.json()
        except ValueError:
            body = None

        if not response.ok:
            message = "Request failed"
            if isinstance(body, dict):
                message = body.get("error") or body.get("message") or message
            logging.warning(f"{method} {path} failed with {response.status_code}: {message}")
            raise ApiRequestError(response.status_code, message)

        return body

    # --- AUTH ---
    def register(self, name: str, email: str, password: str, photo_url: Optional[str] = None) -> Dict[str, Any]:
        payload = {"name": name, "email": email, "password": password}
        if photo_url:
            payload["photoURL"] = photo_url
        return self._request("POST", "/api/auth/register", json=payload)

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Log in and store the returned user and token in the session."""
        result = self._request("POST", "/api/auth/login", json={"email": email, "password": password})
        self.session.login(result.get("user"), result.get("token"))
        return result["user"]

    def logout(self) -> None:
        self.session.logout()

    # --- EVENTS ---
    def list_events(self, search: Optional[str] = None, preset: Optional[str] = None) -> List[Dict[str, Any]]:
        """All matching events, newest date and time first."""
        params = {}
        if search:
            params["search"] = search
        if preset:
            params["filter"] = preset

        events = self._request("GET", "/api/events", params=params)
        return sorted(events, key=lambda e: (e.get("date", ""), e.get("time", "")), reverse=True)

    def my_events(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/events/my-events", auth=True)

    def get_event(self, event_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/api/events/{event_id}")

    def create_event(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        payload = dict(fields)
        if not payload.get("creator") and self.session.user:
            payload["creator"] = self.session.user.get("name")
        return self._request("POST", "/api/events", auth=True, json=payload)

    def update_event(self, event_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        result = self._request("PUT", f"/api/events/{event_id}", auth=True, json=fields)
        return result["event"]

    def delete_event(self, event_id: int) -> None:
        self._request("DELETE", f"/api/events/{event_id}", auth=True)

    def join_event(self, event_id: int) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/events/join/{event_id}", auth=True)

    def leave_event(self, event_id: int) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/events/leave/{event_id}", auth=True)
