"""
Session API calls made with a token obtained through the loopback login.
"""

import requests
from typing import Any, Callable, Dict, Optional

from .constants import DEFAULT_API_ROOT
from .utils import ApiError, DebugMixin

HTTP_OK = 200


class SessionClient(DebugMixin):
    """Bearer token client for the application's auth server."""

    def __init__(self, api_root: str = DEFAULT_API_ROOT, timeout: int = 10,
                 print_debug_fn: Optional[Callable[[str], None]] = None):
        self.api_root = api_root.rstrip('/')
        self.timeout = timeout
        self._setDebug(print_debug_fn)

    def _headers(self, token: str) -> Dict[str, str]:
        return {'Authorization': f'Bearer {token}'}

    def get_user(self, token: str) -> Optional[Dict[str, Any]]:
        """
        Fetch the user owning the session.

        Args:
            token: Session token

        Returns:
            The user attributes, or None if the session is not valid

        Raises:
            ApiError: If the server could not be reached
        """
        url = f"{self.api_root}/user"
        self._printDebug(f"GET {url}")
        try:
            response = requests.get(url, headers=self._headers(token), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Failed to fetch user: {str(e)}")

        if response.status_code != HTTP_OK:
            self._printDebug(f"user lookup returned {response.status_code}")
            return None

        try:
            return response.json()
        except ValueError:
            raise ApiError("Invalid JSON in user response", code=response.status_code)

    def logout(self, token: str) -> bool:
        """
        Invalidate the session on the server.

        Returns:
            True if the server accepted the logout
        """
        url = f"{self.api_root}/logout"
        self._printDebug(f"POST {url}")
        try:
            response = requests.post(url, headers=self._headers(token), timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ApiError(f"Failed to log out: {str(e)}")
        return response.status_code == HTTP_OK
