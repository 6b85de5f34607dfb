import json
import logging
from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from matka.auth import CredentialProvider
from matka.errors import AuthError, DataError, NetworkError

logger = logging.getLogger("matka.http_client")

_AUTH_STATUSES = {401, 403}


def _safe_url(url: str) -> str:
    """Strip query params for safe logging."""
    parsed = urlparse(str(url))
    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}"


class ApiClient:
    """httpx.AsyncClient wrapper with bearer auth and error-taxonomy mapping.

    No retries: every failure is reported once as NetworkError/AuthError/DataError.
    """

    def __init__(
        self,
        name: str,
        base_url: str,
        credentials: CredentialProvider,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        self._name = name
        self._base_url = base_url.rstrip("/")
        self._credentials = credentials

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _headers(self, require_auth: bool) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._credentials.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        elif require_auth:
            raise AuthError()
        return headers

    async def request(
        self, method: str, path: str, *, require_auth: bool = True, **kwargs
    ) -> Any:
        """Execute a request and return the decoded JSON body."""
        headers = self._headers(require_auth)
        url = self._url(path)

        try:
            resp = await self._client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning(
                "[%s] Network error on %s %s: %s",
                self._name, method, _safe_url(url), exc,
            )
            raise NetworkError(message=str(exc) or type(exc).__name__) from exc

        if resp.status_code in _AUTH_STATUSES:
            logger.warning(
                "[%s] Credential rejected (%d) on %s %s",
                self._name, resp.status_code, method, _safe_url(url),
            )
            raise AuthError("credential-rejected")
        if resp.status_code >= 400:
            logger.warning(
                "[%s] Server error %d on %s %s",
                self._name, resp.status_code, method, _safe_url(url),
            )
            raise NetworkError(
                "http-error",
                f"Server responded with {resp.status_code}.",
                status_code=resp.status_code,
            )

        try:
            return resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning(
                "[%s] Invalid JSON from %s %s", self._name, method, _safe_url(url),
            )
            raise DataError("invalid-json") from exc

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> Any:
        return await self.request("POST", path, **kwargs)

    async def aclose(self) -> None:
        await self._client.aclose()

