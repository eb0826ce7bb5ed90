"""Diary API adapter - HTTP client for the diary service."""

import logging

import requests

from quire.config import Config, Tokens, load_config
from quire.core.draft import DiaryEntry
from quire.errors import (
    AuthenticationError,
    AuthorizationError,
    NetworkOrServerError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def _error_message(resp: requests.Response) -> str:
    """Best human-readable message from an error response."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text or resp.reason or f"HTTP {resp.status_code}"
    if isinstance(data, dict):
        errors = data.get("errors")
        if isinstance(errors, dict) and errors:
            # Laravel-style {"errors": {"title": ["The title field is required."]}}
            return "; ".join(msg for msgs in errors.values() for msg in msgs)
        if data.get("message"):
            return str(data["message"])
    return resp.text or f"HTTP {resp.status_code}"


class DiaryAPIAdapter:
    """
    Diary API adapter.

    Implements DiaryRepository protocol. Handles the bearer token and
    maps HTTP failures onto the diary error types. No business logic -
    just I/O.
    """

    def __init__(self, config: Config | None = None, tokens: Tokens | None = None):
        self.config = config or load_config()
        self.tokens = tokens or Tokens.load()
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

    def _url(self, endpoint: str) -> str:
        return f"{self.config.api_base_url.rstrip('/')}{endpoint}"

    def _send(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """Send a request, turning transport failures into NetworkOrServerError."""
        try:
            return self._session.request(
                method,
                self._url(endpoint),
                timeout=self.config.request_timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {endpoint} failed: {e}")
            raise NetworkOrServerError(f"Could not reach diary service: {e}") from e

    def _check(self, resp: requests.Response) -> None:
        """Raise the diary error matching a failed response."""
        if resp.status_code < 400:
            return

        message = _error_message(resp)
        match resp.status_code:
            case 401:
                raise AuthenticationError(f"Not logged in or session expired: {message}")
            case 403:
                raise AuthorizationError(message)
            case 404:
                raise NotFoundError(message)
            case 422:
                raise ValidationError(message)
            case _:
                raise NetworkOrServerError(message, status_code=resp.status_code)

    def _api_request(self, method: str, endpoint: str, payload: dict | None = None) -> dict | list:
        """Make authenticated API request."""
        if not self.tokens.access_token:
            raise AuthenticationError("No access token. Run 'quire login' first.")

        resp = self._send(
            method,
            endpoint,
            json=payload,
            headers={"Authorization": f"{self.tokens.token_type} {self.tokens.access_token}"},
        )
        self._check(resp)
        if not resp.content:
            return {}
        try:
            return resp.json()
        except ValueError as e:
            raise NetworkOrServerError(f"Invalid JSON from diary service: {e}") from e

    # ============== Diary entries ==============

    def list_entries(self) -> list[DiaryEntry]:
        """All entries owned by the caller."""
        data = self._api_request("GET", "/diaries")
        return [DiaryEntry.from_api(item) for item in data]

    def get(self, entry_id: int) -> DiaryEntry:
        """Fetch one entry."""
        return DiaryEntry.from_api(self._api_request("GET", f"/diaries/{entry_id}"))

    def create(self, payload: dict) -> DiaryEntry:
        """Create an entry and return it with its server-assigned id."""
        return DiaryEntry.from_api(self._api_request("POST", "/diaries", payload))

    def update(self, entry_id: int, payload: dict) -> DiaryEntry:
        """Update an entry."""
        return DiaryEntry.from_api(self._api_request("PUT", f"/diaries/{entry_id}", payload))

    def delete(self, entry_id: int) -> None:
        """Delete an entry."""
        self._api_request("DELETE", f"/diaries/{entry_id}")

    # ============== Account ==============

    def _issue_token(self, endpoint: str, payload: dict) -> Tokens:
        resp = self._send("POST", endpoint, json=payload)
        self._check(resp)
        try:
            data = resp.json()
        except ValueError as e:
            raise NetworkOrServerError(f"Invalid JSON from diary service: {e}") from e
        if not isinstance(data, dict) or not data.get("access_token"):
            raise AuthenticationError("Diary service did not return an access token")
        self.tokens = Tokens(
            access_token=data["access_token"],
            token_type=data.get("token_type", "Bearer") or "Bearer",
        )
        return self.tokens

    def login(self, email: str, password: str) -> Tokens:
        """Exchange credentials for a bearer token."""
        return self._issue_token("/login", {"email": email, "password": password})

    def register(self, name: str, email: str, password: str) -> Tokens:
        """Create an account and return its bearer token."""
        return self._issue_token(
            "/register", {"name": name, "email": email, "password": password}
        )

    def logout(self) -> None:
        """Revoke the token server-side. Local state is cleared even if that fails."""
        if self.tokens.access_token:
            try:
                self._api_request("POST", "/logout")
            except (AuthenticationError, NetworkOrServerError) as e:
                logger.warning(f"Logout request failed: {e}")
        self.tokens.clear()

    def current_user(self) -> dict:
        """The authenticated user's profile."""
        return self._api_request("GET", "/user")
