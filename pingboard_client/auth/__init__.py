"""Authentication for the Pingboard API.

Only OAuth bearer tokens are wired up: the caller supplies an access token
that was obtained elsewhere, and it is sent on every request as part of the
client's default headers. Password login is not implemented.

Example:
    >>> from pingboard_client.auth import TokenAuth
    >>> auth = TokenAuth("abc123")
    >>> auth.headers()
    {'Authorization': 'Bearer abc123'}

"""

from __future__ import annotations

from pingboard_client.exceptions import ConfigurationError


class TokenAuth:
    """OAuth access token authentication.

    Attributes:
        token: The access token.

    """

    __slots__ = ("_token",)

    def __init__(self, token: str | None) -> None:
        """Initialize with an access token.

        Raises:
            ConfigurationError: If token is empty or None.

        """
        if not token or not token.strip():
            raise ConfigurationError("An OAuth access token is required")
        self._token = token.strip()

    def headers(self) -> dict[str, str]:
        """Return the Authorization header for this token."""
        return {"Authorization": f"Bearer {self._token}"}

    def __repr__(self) -> str:
        """Return a safe representation without exposing the token."""
        masked = f"{self._token[:4]}..." if len(self._token) > 4 else "***"
        return f"TokenAuth(token={masked!r})"
