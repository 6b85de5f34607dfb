"""
backend/matka/auth.py

Purpose:
    Credential providers injected into the API client and both engines.
    Acquiring the token (login) happens elsewhere; these only hand it out.

Dependencies:
    - matka.config
"""

from __future__ import annotations

from typing import Optional, Protocol

from matka.config import settings


class CredentialProvider(Protocol):
    def get_token(self) -> Optional[str]:
        """Return the current bearer token, or None when logged out."""
        ...


class StaticCredentialProvider:
    """Holds a fixed token in memory; None means logged out."""

    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    def get_token(self) -> Optional[str]:
        return self._token


class SettingsCredentialProvider:
    """Reads MATKA_API_TOKEN from settings on every call."""

    def get_token(self) -> Optional[str]:
        token = (settings.MATKA_API_TOKEN or "").strip()
        return token or None
